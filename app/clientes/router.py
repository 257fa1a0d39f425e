from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.models import User
from app.clientes import service
from app.clientes.schemas import ClientCreate, ClientResponse, ClientUpdate
from app.core.database import get_db

router = APIRouter()


@router.post("/", response_model=ClientResponse, status_code=201)
def create(data: ClientCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.create_client(db, current_user, data)


@router.get("/", response_model=List[ClientResponse])
def list_all(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.list_clients(db, current_user)


@router.get("/buscar", response_model=List[ClientResponse])
def search(
    q: str = Query("", max_length=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return service.search_clients(db, current_user, q)


@router.get("/{client_id}", response_model=ClientResponse)
def get_one(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = service.get_client(db, current_user, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.put("/{client_id}", response_model=ClientResponse)
def update(
    client_id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        client = service.update_client(db, current_user, client_id, data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.delete("/{client_id}", status_code=204)
def delete(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if not service.delete_client(db, current_user, client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    return Response(status_code=204)
