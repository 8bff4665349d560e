import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.database import Base, get_db
from app.db.mongodb import get_station_db
from app.main import app
from app.models import user as user_model  # noqa: F401
from app.services.station import get_station_config


@pytest.fixture
def station_config():
    return get_station_config()


@pytest.fixture
def mongo_db():
    return AsyncMongoMockClient()["fuel_station_test"]


@pytest.fixture
def sql_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(mongo_db, sql_session_factory):
    def override_get_db():
        db = sql_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_station_db] = lambda: mongo_db
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
