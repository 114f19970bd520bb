"""
Pytest configuration and fixtures.

Repository and pipeline tests run against an in-memory SQLite database
built from Base.metadata, so no external database is required.
"""

import contextlib
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.models import Base, UserProfile, Internship, Application
from database.repository import InternshipRepository


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as using the in-memory SQLite database"
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return InternshipRepository(db_session)


@pytest.fixture
def now():
    return datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(db_session, now):
    """One user with three postings and two applications."""
    user = UserProfile(
        id=uuid.uuid4(),
        email="ada@example.com",
        name="Ada Lovelace",
        github_url="https://github.com/ada",
        resume_text="Mathematics student, analytical engines.",
        skills=["Python", "SQL"],
        experience="Research assistant",
        education="BSc Mathematics",
    )
    db_session.add(user)

    postings = [
        Internship(id=uuid.uuid4(), user_id=user.id, title="Data Intern", company="Acme",
                   location="Remote", link="https://acme.example.com/jobs/1",
                   requirements="Python and SQL", created_at=now - timedelta(days=3)),
        Internship(id=uuid.uuid4(), user_id=user.id, title="Backend Intern", company="Globex",
                   location="Berlin", link="https://globex.example.com/jobs/2",
                   created_at=now - timedelta(days=2)),
        Internship(id=uuid.uuid4(), user_id=user.id, title="ML Intern", company="Initech",
                   location=None, link="https://initech.example.com/jobs/3",
                   created_at=now - timedelta(days=1)),
    ]
    db_session.add_all(postings)

    applications = [
        Application(id=uuid.uuid4(), user_id=user.id, internship_id=postings[0].id,
                    status="submitted", notes="Applied via portal",
                    applied_on=now - timedelta(days=5),
                    created_at=now - timedelta(days=6), updated_at=now - timedelta(days=5)),
        Application(id=uuid.uuid4(), user_id=user.id, internship_id=postings[1].id,
                    status="pending",
                    created_at=now - timedelta(days=1), updated_at=now - timedelta(hours=2)),
    ]
    db_session.add_all(applications)
    db_session.commit()

    return {"user": user, "postings": postings, "applications": applications}


@pytest.fixture
def uow(session_factory):
    """Unit of work over the test database with internship_uow's commit/rollback semantics."""
    @contextlib.contextmanager
    def _uow():
        session = session_factory()
        try:
            yield InternshipRepository(session)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _uow
