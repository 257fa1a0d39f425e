"""
Client registry. Every operation is scoped to an owner; admins see all clients.
"""
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.auth.models import User
from app.clientes.models import Client
from app.clientes.schemas import ClientCreate, ClientUpdate
from app.core.logger import logger, audit_log


def _scoped(db: Session, user: User):
    query = db.query(Client)
    if not user.is_admin:
        query = query.filter(Client.user_id == user.id)
    return query


def create_client(db: Session, user: User, data: ClientCreate) -> Client:
    client = Client(user_id=user.id, **data.model_dump(mode="json"))
    db.add(client)
    db.commit()
    db.refresh(client)

    audit_log(action="client_created", user=user.id, resource=f"client_id={client.id}")
    logger.info(f"Client created: id={client.id}")
    return client


def list_clients(db: Session, user: User) -> List[Client]:
    return _scoped(db, user).order_by(Client.full_name).all()


def get_client(db: Session, user: User, client_id: int) -> Optional[Client]:
    return _scoped(db, user).filter(Client.id == client_id).first()


def update_client(db: Session, user: User, client_id: int, data: ClientUpdate) -> Optional[Client]:
    """
    Merges the patch into the stored client and re-validates the result.
    Raises pydantic.ValidationError when the merged client is invalid.
    """
    client = get_client(db, user, client_id)
    if client:
        stored = {field: getattr(client, field) for field in ClientCreate.model_fields}
        merged = ClientCreate(**{**stored, **data.model_dump(exclude_unset=True)})
        for field, value in merged.model_dump(mode="json").items():
            setattr(client, field, value)
        db.commit()
        db.refresh(client)
        audit_log(action="client_updated", user=user.id, resource=f"client_id={client_id}")
    return client


def delete_client(db: Session, user: User, client_id: int) -> Optional[Client]:
    client = get_client(db, user, client_id)
    if client:
        db.delete(client)
        db.commit()
        audit_log(action="client_deleted", user=user.id, resource=f"client_id={client_id}")
    return client


def search_clients(db: Session, user: User, query: str) -> List[Client]:
    """Case-insensitive match on full name, DNI or marital status."""
    term = query.strip().lower()
    if not term:
        return list_clients(db, user)
    pattern = f"%{term}%"
    return _scoped(db, user).filter(
        or_(
            func.lower(Client.full_name).like(pattern),
            Client.dni.like(pattern),
            func.lower(Client.marital_status).like(pattern),
        )
    ).order_by(Client.full_name).all()
