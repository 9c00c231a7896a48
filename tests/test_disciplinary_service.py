from datetime import datetime, timedelta

import pytest

from schemas import DisciplinaryActionCreate, DisciplinaryActionUpdate
from services.disciplinary_service import (
    create_disciplinary_action,
    deactivate_disciplinary_action,
    expire_disciplinary_actions,
    get_active_disciplinary_actions,
    get_all_disciplinary_actions,
    get_moderator_disciplinary_actions,
    update_disciplinary_action,
)
from services.user_service import create_user

NOW = datetime(2026, 3, 18, 9, 0)


@pytest.fixture
def people(db):
    admin = create_user(db, email="boss@company.com", password="Pwd#12345", role="admin")
    moderator = create_user(db, email="mod@company.com", password="Pwd#12345")
    return admin, moderator


def issue(db, admin, moderator, **overrides):
    data = {"moderator_id": moderator.id, "type": "warning", "reason": "Late shift"}
    data.update(overrides)
    return create_disciplinary_action(db, admin.id, DisciplinaryActionCreate(**data))


def test_created_action_is_active_with_medium_severity(db, people):
    admin, moderator = people
    action = issue(db, admin, moderator)
    assert action.is_active is True
    assert action.severity == "medium"
    assert action.admin_id == admin.id


def test_invalid_type_rejected_by_schema():
    with pytest.raises(ValueError):
        DisciplinaryActionCreate(moderator_id=1, type="ban", reason="x")


def test_active_excludes_deactivated_and_expired(db, people):
    admin, moderator = people
    keep = issue(db, admin, moderator, type="strike", severity="high")
    future = issue(db, admin, moderator, expires_at=NOW + timedelta(days=30))
    issue(db, admin, moderator, expires_at=NOW - timedelta(days=1))
    gone = issue(db, admin, moderator)
    deactivate_disciplinary_action(db, gone.id)

    active_ids = {a.id for a in get_active_disciplinary_actions(db, moderator.id, now=NOW)}
    assert active_ids == {keep.id, future.id}
    assert len(get_moderator_disciplinary_actions(db, moderator.id)) == 4
    assert len(get_all_disciplinary_actions(db)) == 4


def test_expiry_sweep_flips_flag(db, people):
    admin, moderator = people
    expired = issue(db, admin, moderator, expires_at=NOW - timedelta(hours=1))
    current = issue(db, admin, moderator, expires_at=NOW + timedelta(hours=1))
    issue(db, admin, moderator)

    assert expire_disciplinary_actions(db, now=NOW) == 1
    db.expire_all()
    assert {a.id for a in get_moderator_disciplinary_actions(db, moderator.id) if not a.is_active} == {expired.id}
    assert current.is_active is True

    # Running again changes nothing
    assert expire_disciplinary_actions(db, now=NOW) == 0


def test_update_keeps_required_fields(db, people):
    admin, moderator = people
    action = issue(db, admin, moderator)

    updated = update_disciplinary_action(db, action.id, DisciplinaryActionUpdate(severity="high", reason=None))
    assert updated.severity == "high"
    assert updated.reason == "Late shift"


def test_update_and_deactivate_missing_action(db):
    assert update_disciplinary_action(db, 99, DisciplinaryActionUpdate(severity="low")) is None
    assert deactivate_disciplinary_action(db, 99) is None


def test_action_lists_accept_limit(db, people):
    admin, moderator = people
    first = issue(db, admin, moderator)
    second = issue(db, admin, moderator)
    third = issue(db, admin, moderator)

    assert [a.id for a in get_all_disciplinary_actions(db, limit=2)] == [third.id, second.id]
    assert [a.id for a in get_moderator_disciplinary_actions(db, moderator.id, limit=1)] == [third.id]
    assert first.id in {a.id for a in get_all_disciplinary_actions(db)}
