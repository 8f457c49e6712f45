"""Engine, session factory and the declarative base with table-name inference."""
import re
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, declared_attr, sessionmaker

from .config import get_settings

settings = get_settings()

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def infer_table_name(class_name: str) -> str:
    """``Review`` -> ``reviews``, ``ProductReview`` -> ``product_reviews``."""
    return _CAMEL_BOUNDARY.sub("_", class_name).lower() + "s"


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return infer_table_name(cls.__name__)


_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
