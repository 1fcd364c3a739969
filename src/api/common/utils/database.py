import os
from dotenv import load_dotenv
from fastapi.logger import logger
from sqlalchemy import create_engine
from sqlmodel import Session, SQLModel

load_dotenv()


def _get_database_url_from_env_vars():
    DB_SCHEME = os.getenv("DB_SCHEME")
    if not DB_SCHEME:
        return None
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "postgres")
    DB_HOST = os.getenv("DB_HOST", "db")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "staffing")
    return f"{DB_SCHEME}://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


def get_database_url():
    url = os.getenv("DATABASE_URL") or _get_database_url_from_env_vars()
    if not url:
        # SQLite file for local development
        url = "sqlite:///./invoicing.db"
    logger.info(f"Using database at {url.split('@')[-1]}")
    return url


DATABASE_URL = get_database_url()

engine = create_engine(
    DATABASE_URL,
    echo=os.getenv("ENV") not in ("production", "test"),
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)


def create_db_and_tables(db_engine=None):
    """Create any missing tables registered on the SQLModel metadata"""
    SQLModel.metadata.create_all(db_engine or engine)


def get_db():
    with Session(engine) as session:
        yield session
