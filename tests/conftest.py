"""
Shared fixtures: in-memory SQLite database seeded with one intervention,
its tenant, a provider and a manager.
"""

import os
from datetime import date, timedelta

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import Intervention, InterventionAssignment, User
from app.models.intervention import STATUS_PLANNING
from app.models.user import ROLE_MANAGER, ROLE_PROVIDER, ROLE_TENANT


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN
    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def participants(db_session):
    """Tenant, provider, manager and an outsider, plus one intervention in planning."""
    tenant = User(id="tenant-1", name="Alice Tenant", role=ROLE_TENANT)
    provider = User(id="provider-1", name="Bob Plumber", role=ROLE_PROVIDER)
    manager = User(id="manager-1", name="Carol Manager", role=ROLE_MANAGER)
    outsider = User(id="provider-2", name="Dave Outsider", role=ROLE_PROVIDER)
    db_session.add_all([tenant, provider, manager, outsider])

    intervention = Intervention(
        id="intervention-1",
        title="Leaking pipe",
        status=STATUS_PLANNING,
        tenant_id=tenant.id,
    )
    db_session.add(intervention)
    db_session.flush()
    db_session.add(InterventionAssignment(
        intervention_id=intervention.id, user_id=provider.id, role=ROLE_PROVIDER
    ))
    db_session.commit()

    return {
        "tenant": tenant,
        "provider": provider,
        "manager": manager,
        "outsider": outsider,
        "intervention": intervention,
    }


@pytest.fixture
def soon():
    """A date two days ahead: inside the proximity and horizon windows."""
    return date.today() + timedelta(days=2)
