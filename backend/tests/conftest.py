import os
import tempfile

# Settings and the engine are built at import time, so configure first
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="prtracker-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    from prtracker.main import app  # noqa: F401  (registers every table)
    from prtracker.db import Base, engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from prtracker.main import app

    return TestClient(app)


@pytest.fixture
def db():
    from prtracker.db import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    from prtracker.auth import hash_password
    from prtracker.repositories.users import UserRepository

    return UserRepository(db).create("runner@example.com", hash_password("secret-pw"))


@pytest.fixture
def session_ctx(user):
    """A signed-in SessionContext for `user` (token not used in-process)."""
    from prtracker.client.session import SessionContext
    from prtracker.schemas.auth import AuthSession

    return SessionContext(
        AuthSession(user_id=user.id, email=user.email, access_token="unused")
    )


@pytest.fixture
def api(client):
    """ApiClient over the TestClient, already signed up."""
    from prtracker.client.http import ApiClient
    from prtracker.client.session import SessionContext

    api = ApiClient(SessionContext(), http=client)
    api.sign_up("api-user@example.com", "secret-pw")
    return api
