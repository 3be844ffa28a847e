from uuid import uuid4
from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


def generate_uuid() -> str:
    return str(uuid4())


class TimestampMixin:
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
