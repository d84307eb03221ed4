import logging
import os

import pytest
from dotenv import load_dotenv

# Configure logging for database operations
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load environment variables before importing settings
load_dotenv()

# Settings need either DATABASE_URL or the DB_* variables at import time
if not os.getenv("DB_NAME"):
    os.environ.setdefault("DATABASE_URL", "sqlite://")

from libraryapp.db.settings import settings

settings.db_url = settings.get_test_db_url()

# Reinitialize the database engine with the test database URL
# This MUST happen before importing the app
from libraryapp.db import database as db_module

db_module.reinit_engine()

from libraryapp import create_app
from libraryapp.db.userdb import InMemoryUserStore, SqlAlchemyUserStore
from libraryapp.services.user_service import UserService


@pytest.fixture(scope="session", autouse=True)
def test_db():
    """
    Session-scoped fixture that applies the schema to the test database.
    Automatically runs once per test session.
    """
    logger.info("=" * 60)
    logger.info(f"Preparing test database ({settings.db_url.split('@')[-1]})")
    logger.info("=" * 60)

    db_module.Base.metadata.drop_all(bind=db_module.engine)
    db_module.init_db()

    yield

    logger.info("Test session complete")


@pytest.fixture(autouse=True)
def clean_users():
    """Delete every user after each test."""
    yield

    with db_module.get_db_session() as db:
        SqlAlchemyUserStore(db).delete_all()


@pytest.fixture
def app():
    app = create_app({"TESTING": True, "INIT_DB": False})

    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture(scope="function")
def db_session():
    """
    Function-scoped fixture that provides a fresh database session for each test.
    Automatically rolls back transactions and closes the session after each test.
    """
    session = db_module.SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(params=["memory", "sqlalchemy"])
def user_store(request):
    """Each store implementation in turn."""
    if request.param == "memory":
        return InMemoryUserStore()
    return SqlAlchemyUserStore(request.getfixturevalue("db_session"))


@pytest.fixture
def user_service(user_store):
    return UserService(user_store)
