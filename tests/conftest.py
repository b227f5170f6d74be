import os

# settings are read at import time
os.environ.setdefault("FIREBASE_PROJECT_ID", "ekart-test")
os.environ.setdefault("FIREBASE_STORAGE_BUCKET", "ekart-test.appspot.com")
os.environ.setdefault("FIREBASE_WEB_API_KEY", "AIza-test-key")
os.environ.setdefault("FIREBASE_COLLECTION_PREFIX", "")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from firebase_admin import auth as firebase_auth
from firebase_admin import firestore

from ekart.config import get_bucket, get_db
from ekart.main import create_app
from fakes import FakeBucket, FakeFirestore, fake_transactional


@pytest.fixture()
def db():
    return FakeFirestore()


@pytest.fixture()
def bucket():
    return FakeBucket()


@pytest.fixture(autouse=True)
def firebase_stubs(monkeypatch):
    """Bearer token `token-<uid>` authenticates as `<uid>`."""

    def verify_id_token(token, check_revoked=False):
        if not token.startswith("token-"):
            raise ValueError("malformed token")
        return {"uid": token[len("token-"):]}

    monkeypatch.setattr(firebase_auth, "verify_id_token", verify_id_token)
    monkeypatch.setattr(firestore, "transactional", fake_transactional)


@pytest.fixture()
def client(db, bucket):
    app = create_app(with_scheduler=False)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_bucket] = lambda: bucket
    return TestClient(app)


def auth(uid):
    return {"Authorization": f"Bearer token-{uid}"}


@pytest.fixture()
def make_user(db):
    def _make(uid, role="buyer", email=None, verified=True, logged_in=True, created_at=None):
        db.collection("users").document(uid).set({
            "user_name": uid.title(),
            "email": email or f"{uid}@example.com",
            "role": role,
            "profile_image": None,
            "is_verified": verified,
            "is_logged_in": logged_in,
            "created_at": created_at or datetime.now(timezone.utc),
        })
        if logged_in:
            db.collection("sessions").document(uid).set({"uid": uid, "created_at": datetime.now(timezone.utc)})
        return uid
    return _make


@pytest.fixture()
def make_product(db):
    def _make(seller_id="seller", name="Mug", price=10.0, stock=5, category="kitchen",
              description="", is_active=True, created_at=None, product_id=None):
        ref = db.collection("products").document(product_id)
        ref.set({
            "seller_id": seller_id,
            "name": name,
            "description": description or f"A {name.lower()}",
            "price": price,
            "category": category,
            "stock": stock,
            "images": [f"https://img.example.com/{name.lower()}.png"],
            "is_active": is_active,
            "created_at": created_at or datetime.now(timezone.utc),
            "updated_at": created_at or datetime.now(timezone.utc),
        })
        return ref.id
    return _make


@pytest.fixture()
def set_address(db):
    def _set(uid, street="1 Main St", city="Pune"):
        db.collection("profiles").document(uid).set({
            "user_id": uid,
            "address": {"street": street, "city": city, "zip": "411001", "country": "IN", "phone": None},
            "business_name": None,
            "gst_number": None,
            "seller_rating": 0,
        })
    return _set


@pytest.fixture()
def fill_cart(db):
    def _fill(uid, *lines):
        db.collection("carts").document(uid).set({
            "buyer_id": uid,
            "items": [{"product_id": pid, "quantity": qty} for pid, qty in lines],
        })
    return _fill
