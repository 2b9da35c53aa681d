from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from overtime.rate_limit import RateLimiter
from overtime.security import CSRFTokenStore
from overtime_api.db.session import Base, get_session, init_db
from overtime_api.domains.overtime.router import get_today
from overtime_api.main import app
from overtime_api.models.user import ROLE_ADMIN, User

TODAY = date(2024, 6, 10)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session
app.dependency_overrides[get_today] = lambda: TODAY


@pytest.fixture(autouse=True)
def reset_database():
    init_db(engine)
    app.state.login_limiter = RateLimiter(max_attempts=5, window=timedelta(minutes=15))
    app.state.csrf_store = CSRFTokenStore()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client):
    """Sign a user up and return ``(auth headers, user id)``."""

    def _register(email, cpf, full_name="Ana Souza", password="senha-forte-1", admin=False):
        response = client.post(
            "/auth/signup",
            json={"email": email, "password": password, "full_name": full_name, "cpf": cpf},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        if admin:
            with TestingSessionLocal() as session:
                session.get(User, body["user_id"]).role = ROLE_ADMIN
                session.commit()
        return {"Authorization": f"Bearer {body['access_token']}"}, body["user_id"]

    return _register


@pytest.fixture
def employee(register):
    return register("ana@redejb.com.br", "52998224725", full_name="Ana Souza")


@pytest.fixture
def admin(register):
    return register("admin@redejb.com.br", "12345678909", full_name="Zeca Admin", admin=True)


@pytest.fixture
def testing_engine():
    return engine


@pytest.fixture
def session_factory():
    return TestingSessionLocal
