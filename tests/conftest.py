"""
Pytest configuration and shared fixtures
"""

import itertools
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from dealerhub.api.config import reset_settings
from dealerhub.db.models import Base, Product, User
from dealerhub.db.session import build_engine, build_session_factory
from dealerhub.ingestion.validator import REQUIRED_FIELDS

TEST_PASSWORD = "secret123"

_phone_numbers = itertools.count(41440000100)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Deterministic settings for every test; never touches real services."""
    monkeypatch.setenv("JWT_SECRET", "test-jwt-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DB_AUTO_CREATE", "false")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.delenv("SMTP_HOST", raising=False)
    monkeypatch.delenv("STRICT_INQUIRY_TRANSITIONS", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def engine():
    """In-memory SQLite engine with the full schema."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_user(session: Session, username: str, role_id: int = 3, **overrides) -> User:
    from dealerhub.api.security import hash_password

    fields = dict(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        company_name=f"{username.title()} Watches GmbH",
        company_address="Bahnhofstrasse 1, Zurich",
        registered_legal_number=f"+{next(_phone_numbers)}",
        plan="basic",
        role_id=role_id,
    )
    fields.update(overrides)
    user = User(**fields)
    session.add(user)
    session.commit()
    return user


@pytest.fixture
def seller(db_session) -> User:
    return make_user(db_session, "seller", registered_legal_number="+41440000001")


@pytest.fixture
def buyer(db_session) -> User:
    return make_user(db_session, "buyer", registered_legal_number="+41440000002")


@pytest.fixture
def admin(db_session) -> User:
    return make_user(db_session, "admin", role_id=1, registered_legal_number="+41440000003")


def inventory_row(overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """One fully populated inventory row, with selected columns replaced."""
    row = {
        "Stock ID": "S1",
        "Model No": "126610LN",
        "Brand": "Rolex",
        "Gender": "Men",
        "Metal Type": "Steel",
        "Case Size (MM)": "41",
        "Condition": "Unworn",
        "Box": "Yes",
        "Paper": "Yes",
        "Total Price ($US)": "14,500",
        "Launch Year": "2020",
        "Image Link": "https://cdn.example.com/s1.jpg",
        "Video Link": "https://cdn.example.com/s1.mp4",
        "Location": "Zurich",
    }
    row.update(overrides or {})
    return row


def write_csv(path, rows: List[Dict[str, str]]):
    pd.DataFrame(rows, columns=list(REQUIRED_FIELDS)).to_csv(path, index=False)
    return path


def write_xlsx(path, rows: List[Dict[str, str]]):
    pd.DataFrame(rows, columns=list(REQUIRED_FIELDS)).to_excel(path, index=False, engine="openpyxl")
    return path


def add_products(session: Session, owner: User, stock_ids: List[str], **fields) -> List[Product]:
    products = [
        Product(
            stock_id=stock_id,
            brand=fields.get("brand", "Omega"),
            gender="Men",
            condition="Used",
            box="No",
            paper="No",
            total_price=fields.get("total_price", 5000.0),
            visibility=fields.get("visibility", True),
            user_id=owner.id,
        )
        for stock_id in stock_ids
    ]
    session.add_all(products)
    session.commit()
    return products


class FakeRedis:
    """In-memory stand-in for the redis client calls the OTP store makes."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, Optional[int]] = {}

    def ping(self) -> bool:
        return True

    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def expire_now(self, key: str) -> None:
        """Simulate the TTL running out."""
        self.delete(key)


class FakeMailer:
    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    def send_otp(self, recipient: str, code: str) -> None:
        self.sent.append((recipient, code))


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def otp_store(fake_redis):
    from dealerhub.api.services.otp_store import RedisOTPStore

    return RedisOTPStore(client=fake_redis)


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def app(session_factory, otp_store, mailer):
    """Application wired to the in-memory database and fake Redis/SMTP."""
    from dealerhub.api.dependencies import get_db, get_mailer, get_otp_store
    from dealerhub.api.main import create_app

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_store] = lambda: otp_store
    app.dependency_overrides[get_mailer] = lambda: mailer
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def auth_headers(user: User) -> Dict[str, str]:
    from dealerhub.api.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}
