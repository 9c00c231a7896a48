from datetime import timedelta

from fastapi.testclient import TestClient

import main
from schemas import DisciplinaryActionCreate
from services.disciplinary_service import create_disciplinary_action, get_disciplinary_action
from services.timezone_utils import utc_now
from services.user_service import create_user


def test_lifespan_starts_daily_sweep(monkeypatch):
    monkeypatch.setattr(main, "ENABLE_SCHEDULER", True)
    with TestClient(main.app):
        scheduler = main.app.state.scheduler
        assert scheduler.running
        assert scheduler.get_job("expire_disciplinary_actions") is not None
    assert not scheduler.running


def test_scheduler_can_be_disabled(monkeypatch):
    monkeypatch.setattr(main, "ENABLE_SCHEDULER", False)
    with TestClient(main.app) as client:
        assert main.app.state.scheduler is None
        assert client.get("/health").status_code == 200


def test_sweep_job_deactivates_expired_actions(db):
    admin = create_user(db, email="boss@company.com", password="Pwd#12345", role="admin")
    moderator = create_user(db, email="mod@company.com", password="Pwd#12345")
    action = create_disciplinary_action(db, admin.id, DisciplinaryActionCreate(
        moderator_id=moderator.id,
        type="warning",
        reason="Late",
        expires_at=utc_now() - timedelta(days=1),
    ))

    main.expire_disciplinary_job()

    db.expire_all()
    assert get_disciplinary_action(db, action.id).is_active is False
