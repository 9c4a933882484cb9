import os
import uuid

# Settings are read at import time by app.core.config / app.database
os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.auth import get_current_user
from app.database import get_session
from app.main import app
from app.models.user import User
from app.repositories.cms_repo import CmsRepository
from app.repositories.product_repo import ProductRepository
from app.routers.banners import get_cms_service
from app.routers.products import get_product_service
from app.schemas.product import ProductCreate
from app.services.cms_service import CmsService
from app.services.product_service import ProductService


class FakeStorage:
    """In-memory stand-in for the Supabase bucket."""

    BASE = "https://cdn.test/storage/v1/object/public/bookstore-products/"

    def __init__(self):
        self.uploaded: dict[str, bytes] = {}
        self.deleted: list[str] = []

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> str:
        self.uploaded[path] = file_bytes
        return self.BASE + path

    def delete_public_url(self, url: str) -> None:
        self.deleted.append(url)


class AuthState:
    """Who the test client is acting as (None = guest)."""

    def __init__(self):
        self.user_id: uuid.UUID | None = None


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def product_service(storage):
    return ProductService(ProductRepository(), storage=storage)


@pytest.fixture
def client(session, storage, auth, product_service):
    def get_session_override():
        return session

    def get_current_user_override(db: Session = Depends(get_session)):
        if auth.user_id is None:
            return None
        return db.get(User, auth.user_id)

    cms_service = CmsService(CmsRepository(), storage=storage)

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_current_user] = get_current_user_override
    app.dependency_overrides[get_product_service] = lambda: product_service
    app.dependency_overrides[get_cms_service] = lambda: cms_service

    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session: Session, email: str, role: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        first_name=email.split("@")[0],
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin_user(session):
    return _make_user(session, "admin@example.com", "admin")


@pytest.fixture
def customer(session):
    return _make_user(session, "reader@example.com", "user")


@pytest.fixture
def as_admin(auth, admin_user):
    auth.user_id = admin_user.id
    return admin_user


@pytest.fixture
def as_customer(auth, customer):
    auth.user_id = customer.id
    return customer


@pytest.fixture
def make_product(session, product_service):
    """Create a product straight through the service layer."""

    def _make(**fields):
        return product_service.create_product(session, ProductCreate(**fields))

    return _make
