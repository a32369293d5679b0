import mongomock
import pytest

from app import create_app
from config import TestConfig
from models.users import User
from utils.auth import generate_token
from utils.db import mongo


@pytest.fixture
def upload_folder(tmp_path):
    folder = tmp_path / "uploads" / "profiles"
    return folder


@pytest.fixture
def app(upload_folder):
    config = type("Config", (TestConfig,), {"UPLOAD_FOLDER": str(upload_folder)})
    app = create_app(config)

    # In-memory MongoDB for each test
    mongo.cx = mongomock.MongoClient()
    mongo.db = mongo.cx["helpdesk_test"]

    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email="agent@example.com", role="user", password="secret123", **fields):
        with app.app_context():
            return User(name=fields.pop("name", "Agent Smith"), email=email,
                        password=password, role=role, **fields).save()
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        with app.app_context():
            return {"Authorization": f"Bearer {generate_token(user['_id'])}"}
    return _auth_headers


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role="admin", name="Ada Admin")
