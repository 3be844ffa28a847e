from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


class User(TimestampMixin, Base):
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    # sha256 of the only access token currently accepted; NULL means logged out
    current_token_hash = Column(String(64))

    # Relationships
    roles = relationship("Role", secondary="user_role", back_populates="users", lazy="selectin")
    permissions = relationship("Permission", secondary="user_permission", lazy="selectin")


class UserRole(Base):
    __tablename__ = 'user_role'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    role_id = Column(ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True, nullable=False)


class UserPermission(Base):
    __tablename__ = 'user_permission'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    permission_id = Column(ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True, nullable=False)
