"""
Pytest configuration and fixtures for all tests.

Every test gets a fresh in-memory SQLite database; the permission registry
and built-in roles are seeded for tests that ask for ``seeded``.
"""

import os
import sys

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_MIGRATE"] = "false"
os.environ["AUTO_SEED"] = "false"

# Ensure school_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from school_backend.database import get_db
from school_backend.encryption import EncryptionService
from school_backend.model import Base
from school_backend.model.academic import AcademicYear, Classroom, Subject, TeachingAssignment
from school_backend.model.auth import User
from school_backend.model.people import Employee, Student
from school_backend.model.role import Permission, Role
from school_backend.permissions.passwords import hash_password
from school_backend.seeder import seed_permissions, seed_roles

TEST_PASSWORD = "Secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Create a new database session for a test."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Registry permissions plus the admin and default roles."""
    permissions = seed_permissions(db)
    seed_roles(db, permissions)
    return db


@pytest.fixture
def encryption():
    return EncryptionService("k" * 32)


@pytest.fixture
def make_role(db):
    """Create a role holding the given permission names, creating missing permissions."""

    def factory(name: str, permissions=(), is_default: bool = False) -> Role:
        grants = []
        for permission_name in permissions:
            permission = db.query(Permission).filter(Permission.name == permission_name).first()
            if permission is None:
                permission = Permission(name=permission_name)
                db.add(permission)
            grants.append(permission)
        role = Role(name=name, is_default=is_default, permissions=grants)
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    return factory


@pytest.fixture
def make_user(db):
    """Create a user with the given roles; the password is TEST_PASSWORD."""

    def factory(username: str, roles=(), password: str = TEST_PASSWORD) -> User:
        user = User(
            name=username.title(),
            username=username,
            email=f"{username}@school.org",
            password=hash_password(password),
            roles=list(roles)
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def client(db):
    """TestClient whose requests share the test session."""
    from school_backend.server import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def school(db):
    """One active year, a classroom with two students and a teaching assignment."""
    year = AcademicYear(name="2024/2025", status="ACTIVE", start_date=date(2024, 7, 15), end_date=date(2025, 6, 20))
    teacher = Employee(full_name="Budi Santoso", job_title="Teacher")
    subject = Subject(code="MTK", name="Matematika")
    students = [Student(full_name="Ahmad Fauzi"), Student(full_name="Siti Aminah")]
    classroom = Classroom(academic_year=year, name="X-A", level="10", homeroom_teacher=teacher, students=students)
    assignment = TeachingAssignment(classroom=classroom, subject=subject, teacher=teacher)
    db.add_all([year, teacher, subject, classroom, assignment, *students])
    db.commit()
    return {
        "year": year,
        "teacher": teacher,
        "subject": subject,
        "classroom": classroom,
        "students": students,
        "assignment": assignment
    }
