"""Tests for the validation workflow engine (core/workflow.py)."""

import uuid

import pytest
from sqlalchemy import select

from formaflow.core.errors import ConflictError, ForbiddenError, InvalidStateError
from formaflow.core.workflow import (
    available_gates,
    check_actor,
    gate_applies,
    is_terminal,
    list_pending,
    plan_transition,
    validate_session,
)
from formaflow.models import SessionAuditLog, TrainingSession, User
from formaflow.models.enums import AppRole, SessionStatus, TrainingType, ValidationGate
from tests.factories import TrainingSessionFactory, UserFactory

HSE = TrainingType.HSE
METIER = TrainingType.METIER


def _actor(role: AppRole) -> User:
    return User(id=uuid.uuid4(), email=f"{role.value}@example.com", role=role.value)


def _session(status: SessionStatus, training_type: TrainingType) -> TrainingSession:
    return TrainingSession(status=status.value, type=training_type.value)


class TestPlanTransition:
    """Pure transition table."""

    def test_hr_approve_metier_validates(self):
        assert (
            plan_transition(SessionStatus.PLANNED, METIER, ValidationGate.HR, approve=True)
            == SessionStatus.VALIDATED_HR
        )

    def test_hr_approve_hse_waits_for_hse_gate(self):
        assert (
            plan_transition(SessionStatus.PLANNED, HSE, ValidationGate.HR, approve=True)
            == SessionStatus.AWAITING_HSE
        )

    def test_hse_approve_after_hr(self):
        assert (
            plan_transition(SessionStatus.AWAITING_HSE, HSE, ValidationGate.HSE, approve=True)
            == SessionStatus.VALIDATED_HSE
        )

    def test_accepts_raw_string_values(self):
        assert plan_transition("planned", "Métier", "hr", True) == SessionStatus.VALIDATED_HR

    @pytest.mark.parametrize(
        "status,training_type,gate",
        [
            (SessionStatus.PLANNED, METIER, ValidationGate.HR),
            (SessionStatus.PLANNED, HSE, ValidationGate.HR),
            (SessionStatus.AWAITING_HSE, HSE, ValidationGate.HSE),
        ],
    )
    def test_reject_cancels_session_waiting_on_gate(self, status, training_type, gate):
        assert plan_transition(status, training_type, gate, approve=False) == SessionStatus.CANCELLED

    @pytest.mark.parametrize(
        "status,training_type,gate",
        [
            (SessionStatus.PLANNED, HSE, ValidationGate.HSE),
            (SessionStatus.AWAITING_HSE, HSE, ValidationGate.HR),
            (SessionStatus.VALIDATED_HR, METIER, ValidationGate.HR),
            (SessionStatus.VALIDATED_HSE, HSE, ValidationGate.HR),
            (SessionStatus.VALIDATED_HSE, HSE, ValidationGate.HSE),
            (SessionStatus.ONGOING, METIER, ValidationGate.HR),
            (SessionStatus.ONGOING, HSE, ValidationGate.HSE),
        ],
    )
    def test_reject_outside_gate_source_status_is_refused(self, status, training_type, gate):
        with pytest.raises(InvalidStateError) as exc_info:
            plan_transition(status, training_type, gate, approve=False)
        assert exc_info.value.details == {
            "status": status.value,
            "type": training_type.value,
            "gate": gate.value,
        }

    def test_hse_gate_never_applies_to_metier(self):
        with pytest.raises(InvalidStateError) as exc_info:
            plan_transition(SessionStatus.PLANNED, METIER, ValidationGate.HSE, approve=True)
        assert exc_info.value.details["gate"] == "hse"

        with pytest.raises(InvalidStateError):
            plan_transition(SessionStatus.PLANNED, METIER, ValidationGate.HSE, approve=False)

    def test_hse_approve_before_hr_is_refused(self):
        with pytest.raises(InvalidStateError):
            plan_transition(SessionStatus.PLANNED, HSE, ValidationGate.HSE, approve=True)

    def test_second_hr_approval_is_refused(self):
        with pytest.raises(InvalidStateError):
            plan_transition(SessionStatus.VALIDATED_HR, METIER, ValidationGate.HR, approve=True)
        with pytest.raises(InvalidStateError):
            plan_transition(SessionStatus.AWAITING_HSE, HSE, ValidationGate.HR, approve=True)

    @pytest.mark.parametrize("status", [SessionStatus.CANCELLED, SessionStatus.COMPLETED])
    @pytest.mark.parametrize("approve", [True, False])
    def test_terminal_statuses_are_absorbing(self, status, approve):
        with pytest.raises(InvalidStateError) as exc_info:
            plan_transition(status, HSE, ValidationGate.HR, approve=approve)
        assert exc_info.value.status_code == 400
        assert exc_info.value.details["status"] == status.value

    def test_terminal_and_gate_helpers(self):
        assert is_terminal("cancelled")
        assert is_terminal(SessionStatus.COMPLETED)
        assert not is_terminal(SessionStatus.AWAITING_HSE)
        assert gate_applies("hse", "HSE")
        assert not gate_applies("hse", "Métier")


class TestActorChecks:
    """Role gating per validation gate."""

    @pytest.mark.parametrize("role", [AppRole.HR, AppRole.DRH])
    def test_hr_gate_roles(self, role):
        check_actor(ValidationGate.HR, _actor(role))

    def test_hse_gate_role(self):
        check_actor(ValidationGate.HSE, _actor(AppRole.HSE))

    @pytest.mark.parametrize(
        "role",
        [AppRole.HSE, AppRole.MANAGER, AppRole.FORMATEUR, AppRole.APPRENANT, AppRole.SUPER_ADMIN],
    )
    def test_hr_gate_refuses_other_roles(self, role):
        with pytest.raises(ForbiddenError) as exc_info:
            check_actor(ValidationGate.HR, _actor(role))
        assert exc_info.value.status_code == 403
        assert exc_info.value.details["required_roles"] == ["drh", "hr"]

    @pytest.mark.parametrize("role", [AppRole.HR, AppRole.DRH, AppRole.SUPER_ADMIN])
    def test_hse_gate_refuses_hr_roles(self, role):
        with pytest.raises(ForbiddenError):
            check_actor(ValidationGate.HSE, _actor(role))


class TestAvailableGates:
    def test_hr_sees_hr_gate_on_planned(self):
        gates = available_gates(_session(SessionStatus.PLANNED, HSE), _actor(AppRole.HR))
        assert gates == [ValidationGate.HR]

    def test_hse_sees_nothing_until_hr_approved(self):
        actor = _actor(AppRole.HSE)
        assert available_gates(_session(SessionStatus.PLANNED, HSE), actor) == []
        assert available_gates(_session(SessionStatus.AWAITING_HSE, HSE), actor) == [
            ValidationGate.HSE
        ]

    def test_hr_sees_nothing_on_awaiting_hse(self):
        assert available_gates(_session(SessionStatus.AWAITING_HSE, HSE), _actor(AppRole.DRH)) == []

    def test_apprenant_sees_nothing(self):
        assert available_gates(_session(SessionStatus.PLANNED, METIER), _actor(AppRole.APPRENANT)) == []


class TestValidateSession:
    """Engine applied to persisted sessions."""

    @pytest.mark.asyncio
    async def test_hr_approval_stamps_and_bumps_version(self, db_session):
        hr = await UserFactory.create(db_session, role="hr")
        session = await TrainingSessionFactory.create(db_session, type="Métier")
        assert session.version == 1

        result = await validate_session(db_session, session, "hr", True, hr)

        assert result.status == "validated_hr"
        assert result.validated_hr_by == hr.id
        assert result.validated_hr_at is not None
        assert result.validated_hse_at is None
        assert result.version == 2

    @pytest.mark.asyncio
    async def test_full_hse_path(self, db_session):
        hr = await UserFactory.create(db_session, role="drh")
        hse = await UserFactory.create(db_session, role="hse")
        session = await TrainingSessionFactory.create(db_session, type="HSE")

        await validate_session(db_session, session, ValidationGate.HR, True, hr)
        assert session.status == "awaiting_hse"
        assert session.validated_hse_at is None

        await validate_session(db_session, session, ValidationGate.HSE, True, hse)
        assert session.status == "validated_hse"
        assert session.validated_hr_by == hr.id
        assert session.validated_hse_by == hse.id
        assert session.validated_hse_at >= session.validated_hr_at

    @pytest.mark.asyncio
    async def test_rejection_cancels_without_stamps(self, db_session):
        hr = await UserFactory.create(db_session, role="hr")
        session = await TrainingSessionFactory.create(db_session, type="HSE")

        await validate_session(db_session, session, "hr", False, hr, reason="Budget gelé")

        assert session.status == "cancelled"
        assert session.validated_hr_at is None
        assert session.validated_hr_by is None

    @pytest.mark.asyncio
    async def test_forbidden_leaves_session_untouched(self, db_session):
        manager = await UserFactory.create(db_session, role="manager")
        session = await TrainingSessionFactory.create(db_session)

        with pytest.raises(ForbiddenError):
            await validate_session(db_session, session, "hr", True, manager)

        assert session.status == "planned"
        assert session.version == 1
        logs = await db_session.execute(
            select(SessionAuditLog).where(SessionAuditLog.session_id == session.id)
        )
        assert logs.scalars().all() == []

    @pytest.mark.asyncio
    async def test_stale_expected_version_conflicts(self, db_session):
        hr = await UserFactory.create(db_session, role="hr")
        session = await TrainingSessionFactory.create(db_session)

        with pytest.raises(ConflictError) as exc_info:
            await validate_session(db_session, session, "hr", True, hr, expected_version=3)

        assert exc_info.value.details == {"expected_version": 3, "current_version": 1}
        assert session.status == "planned"

    @pytest.mark.asyncio
    async def test_writes_audit_entry(self, db_session):
        hr = await UserFactory.create(db_session, role="hr", email="rh@example.com")
        session = await TrainingSessionFactory.create(db_session)

        await validate_session(db_session, session, "hr", True, hr, reason="OK budget")

        result = await db_session.execute(
            select(SessionAuditLog).where(SessionAuditLog.session_id == session.id)
        )
        entry = result.scalar_one()
        assert entry.action == "APPROVE_HR"
        assert entry.changed_by == "rh@example.com"
        assert entry.reason == "OK budget"
        assert set(entry.changed_fields) == {"status", "validated_hr_at", "validated_hr_by"}
        assert entry.old_values["status"] == "planned"
        assert entry.new_values["status"] == "validated_hr"
        assert entry.new_values["validated_hr_by"] == str(hr.id)

    @pytest.mark.asyncio
    async def test_list_pending_orders_by_start(self, db_session):
        from datetime import datetime

        creator = await UserFactory.create(db_session, role="hr")
        later = await TrainingSessionFactory.create(
            db_session, created_by=creator.id, start_datetime=datetime(2030, 3, 2, 9, 0)
        )
        sooner = await TrainingSessionFactory.create(
            db_session,
            created_by=creator.id,
            type="HSE",
            status="awaiting_hse",
            start_datetime=datetime(2030, 3, 1, 9, 0),
        )
        await TrainingSessionFactory.create(
            db_session, created_by=creator.id, status="validated_hr"
        )

        pending = await list_pending(db_session)

        assert [s.id for s in pending] == [sooner.id, later.id]
