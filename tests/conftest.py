import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token, get_password_hash
from app.auth.models import User

# In-memory database shared by every test module
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def make_user(db, username: str, role: str = "user") -> User:
    user = User(
        username=username,
        email=f"{username}@test.com",
        first_name=username.split("_")[0].title(),
        last_name="Test",
        hashed_password=get_password_hash("password123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def client_for(user: User) -> TestClient:
    client = TestClient(app)
    token = create_access_token({"sub": user.username})
    client.cookies.set("access_token", f"Bearer {token}")
    return client


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    return TestClient(app)


@pytest.fixture()
def user(db_session):
    return make_user(db_session, "ana_torres")


@pytest.fixture()
def other_user(db_session):
    return make_user(db_session, "luis_rojas")


@pytest.fixture()
def auth_client(user):
    return client_for(user)


@pytest.fixture()
def other_client(other_user):
    return client_for(other_user)


@pytest.fixture()
def admin_client(db_session):
    return client_for(make_user(db_session, "admin_root", role="admin"))
