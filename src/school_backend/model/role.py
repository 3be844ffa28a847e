from sqlalchemy import Boolean, Column, ForeignKey, String, Text, false
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, generate_uuid


class Role(TimestampMixin, Base):
    __tablename__ = 'roles'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    # Assigned automatically on self-registration
    is_default = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    permissions = relationship("Permission", secondary="role_permission", back_populates="roles", lazy="selectin")
    users = relationship("User", secondary="user_role", back_populates="roles")


class Permission(TimestampMixin, Base):
    __tablename__ = 'permissions'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)

    roles = relationship("Role", secondary="role_permission", back_populates="permissions")


class RolePermission(Base):
    __tablename__ = 'role_permission'

    role_id = Column(ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    permission_id = Column(ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True, nullable=False)
