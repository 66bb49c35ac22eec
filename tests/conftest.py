"""
Pytest fixtures for the rental workflow tests.

Provides a fresh in-memory SQLite database per test, user/property/offer
factories, a deterministic transaction id generator and an API client
that shares the test session.
"""
import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import date
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from database import build_engine, get_session
from main import app
from models import Base, User, Property, Offer, OfferStatus
from services.identifiers import TransactionIdGenerator

JWT_SECRET = "test-secret"


@pytest.fixture(scope='function')
def engine():
    """Fresh schema on a private in-memory database."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def owner(db_session):
    """Property owner."""
    user = User(email="owner@example.com", username="asha", first_name="Asha", last_name="Rao", phone="9800000001")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def tenant(db_session):
    user = User(email="tenant@example.com", username="vikram", first_name="Vikram", last_name="Shah")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def stranger(db_session):
    """A user who is neither the owner nor the tenant."""
    user = User(email="stranger@example.com", username="mallory", first_name="Mallory")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def listing(db_session, owner):
    prop = Property(
        owner_id=owner.id,
        property_name="Lake View 2BHK",
        address="12 Lake Road",
        city="Pune",
        rent_amount=Decimal("15000"),
        booking_advance=Decimal("5000"),
    )
    db_session.add(prop)
    db_session.commit()
    return prop


@pytest.fixture(scope='function')
def make_offer(db_session, owner, tenant, listing):
    """Factory for offers on `listing` from `tenant`; accepted with a joining day of 10 by default."""
    def _make(
        status=OfferStatus.ACCEPTED,
        offer_rent=Decimal("15000"),
        desired_joining_date=date(2025, 12, 10),
        requested_advance_amount=Decimal("5000"),
        offer_booking_amount=None,
        **extra
    ):
        offer = Offer(
            property_id=listing.id,
            owner_id=owner.id,
            tenant_id=tenant.id,
            offer_rent=offer_rent,
            joining_date_estimate="Early December",
            desired_joining_date=desired_joining_date,
            requested_advance_amount=requested_advance_amount,
            offer_booking_amount=offer_booking_amount,
            status=status,
            **extra
        )
        db_session.add(offer)
        db_session.commit()
        return offer

    return _make


@pytest.fixture(scope='function')
def offer(make_offer):
    return make_offer()


@pytest.fixture(scope='function')
def id_generator():
    """Deterministic ids: fixed clock, characters cycled from the alphabet."""
    ticks = count()
    alphabet_index = count()
    return TransactionIdGenerator(
        clock=lambda: 1767225600000 + next(ticks),
        choice=lambda alphabet: alphabet[next(alphabet_index) % len(alphabet)],
    )


def token_for(user_id) -> str:
    return jwt.encode({"id": user_id}, JWT_SECRET, algorithm="HS256")


@pytest.fixture(scope='function')
def auth():
    """Build an Authorization header for a user id."""
    def _headers(user_id):
        return {"Authorization": f"Bearer {token_for(user_id)}"}

    return _headers


@pytest.fixture(scope='function')
def client(db_session):
    """API client whose requests run on the test session."""
    def override_get_session():
        try:
            yield db_session
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
