from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.exceptions import (
    ConcurrentModificationError,
    DuplicateInvitationError,
    PlanNotFoundError,
)
from models.base import Base
from schemas.plan import CreatePlanRequest, InvitationStatus
from schemas.user import User
from utils.plan_manager import PlanManager


def _plan_request():
    return CreatePlanRequest(
        title="Algorithms",
        description="",
        startDate=date(2026, 11, 1),
        endDate=date(2026, 11, 30),
    )


@pytest.fixture
def file_sessions(tmp_path):
    """Two independent sessions on a file database"""
    engine = create_engine(f"sqlite:///{tmp_path / 'plans.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    first, second = factory(), factory()
    yield first, second
    first.close()
    second.close()
    engine.dispose()


def test_create_plan_sets_initial_version(db_session):
    model = PlanManager(db_session).create_plan(_plan_request(), "owner")

    assert model.version == 1
    assert [(m.user_id, m.role) for m in model.members] == [("owner", "leader")]


def test_each_write_bumps_version(db_session):
    manager = PlanManager(db_session)
    model = manager.create_plan(_plan_request(), "owner")

    model = manager.invite_member(model.plan_id, "owner", "b@x.com")

    assert model.version == 2


def test_duplicate_invitation(db_session):
    manager = PlanManager(db_session)
    plan_id = manager.create_plan(_plan_request(), "owner").plan_id
    manager.invite_member(plan_id, "owner", "b@x.com")

    with pytest.raises(DuplicateInvitationError):
        manager.invite_member(plan_id, "owner", "b@x.com")


def test_accepting_twice_listed_member_is_not_duplicated(db_session):
    manager = PlanManager(db_session)
    plan_id = manager.create_plan(_plan_request(), "owner").plan_id
    bob = User(user_id="bob", name="Bob", email="b@x.com", password_hash="x")
    for _ in range(2):
        model = manager.invite_member(plan_id, "owner", "b@x.com")
        invitation_id = model.invitations[-1].invitation_id
        model = manager.respond_to_invitation(
            plan_id, invitation_id, bob, InvitationStatus.ACCEPTED
        )

    assert [m.user_id for m in model.members] == ["owner", "bob"]


def test_denied_action_looks_like_missing_plan(db_session):
    manager = PlanManager(db_session)
    plan_id = manager.create_plan(_plan_request(), "owner").plan_id

    with pytest.raises(PlanNotFoundError):
        manager.invite_member(plan_id, "stranger", "b@x.com")


def test_stale_write_is_rejected(file_sessions):
    first, second = file_sessions
    plan_id = PlanManager(first).create_plan(_plan_request(), "owner").plan_id
    first_manager = PlanManager(first)
    second_manager = PlanManager(second)

    # Both requests read the plan before either writes; the session only
    # keeps weak references, so hold the first read until its write
    stale = first_manager.get_plan(plan_id, "owner")
    assert stale.version == 1
    second_manager.get_plan(plan_id, "owner")
    second_manager.invite_member(plan_id, "owner", "b@x.com")

    with pytest.raises(ConcurrentModificationError):
        first_manager.invite_member(plan_id, "owner", "c@x.com")
    assert stale.plan_id == plan_id

    # A retry reads the fresh state and succeeds
    model = first_manager.invite_member(plan_id, "owner", "c@x.com")
    assert [inv.email for inv in model.invitations] == ["b@x.com", "c@x.com"]
    assert model.version == 3
