"""Pytest configuration and fixtures"""
import os
import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("ADMIN_API_KEY", "test_admin_key")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "ACtest")
os.environ.setdefault("TWILIO_AUTH_TOKEN", "test_twilio_token")
os.environ.setdefault("TWILIO_PHONE_NUMBER", "+15550000000")

from thermal.auth.session import create_web_session
from thermal.cart import CartItem, ItemKind, MemoryStorage
from thermal.members import ClubRepository, get_club_repository


@pytest.fixture
def memory_storage():
    """Empty in-memory key-value storage"""
    return MemoryStorage()


@pytest.fixture
def basic_plan():
    return CartItem(
        id="plan-basic",
        kind=ItemKind.MEMBERSHIP,
        name="Basic",
        description="Monthly access to the thermal circuit",
        unit_price_minor_units=6500,
        quantity=1,
        payload={"planType": "basic", "features": ["sauna", "steam room"]},
    )


@pytest.fixture
def premium_plan():
    return CartItem(
        id="plan-premium",
        kind=ItemKind.MEMBERSHIP,
        name="Premium",
        unit_price_minor_units=9900,
        quantity=1,
    )


@pytest.fixture
def ten_visit_card():
    return CartItem(
        id="punch-10",
        kind=ItemKind.PUNCH_CARD,
        name="10-Visit Pass",
        unit_price_minor_units=12000,
    )


@pytest.fixture
def app_storage():
    """Storage shared by the cart, reset-code and club-record dependencies in API tests"""
    return MemoryStorage()


@pytest.fixture
def club_repo(app_storage):
    return ClubRepository(app_storage)


@pytest.fixture
def client(app_storage, club_repo):
    """Test client with in-memory storage"""
    from api.index import app
    from thermal.routers.auth import get_reset_code_storage
    from thermal.routers.cart import get_cart_storage

    app.dependency_overrides[get_cart_storage] = lambda: app_storage
    app.dependency_overrides[get_reset_code_storage] = lambda: app_storage
    app.dependency_overrides[get_club_repository] = lambda: club_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def member_token():
    return create_web_session("member-42", "sauna_fan", "member")


@pytest.fixture
def staff_token():
    return create_web_session("staff-7", "front_desk", "staff")


@pytest.fixture
def admin_token():
    return create_web_session("admin-1", "owner", "admin")
