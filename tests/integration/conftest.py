"""
Integration test fixtures. Overrides get_db for API tests with in-memory DB.

The API and the seeding fixtures share one in-memory engine (StaticPool), so
rows committed through ``db_session`` are visible to requests.
"""
import pytest
from sqlalchemy.orm import sessionmaker


@pytest.fixture
def override_get_db(in_memory_engine):
    """Create the schema on the shared engine and return a get_db replacement."""
    import api.models.models  # noqa: F401
    from api.config import Base
    Base.metadata.create_all(in_memory_engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def catalog(override_get_db, seeded):
    """Seeded catalog (course, lessons, path, learner) on the API's database."""
    return seeded


@pytest.fixture
def signed_in_client(api_client, catalog):
    """API client logged in as the seeded learner (cookie set)."""
    response = api_client.post(
        "/auth/login",
        json={"email": "learner@example.com", "password": "secret123"},
    )
    assert response.status_code == 200
    return api_client
