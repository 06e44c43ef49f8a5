"""Session validation workflow.

A session is created ``planned``. The HR gate (roles hr/drh) approves it to
``validated_hr`` for Métier trainings or to ``awaiting_hse`` for HSE
trainings, which then need the HSE gate (role hse) to reach
``validated_hse``. Rejecting at a gate cancels the session. ``cancelled`` and
``completed`` are terminal.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from formaflow.core.audit import log_session_change
from formaflow.core.errors import ConflictError, DatabaseError, ForbiddenError, InvalidStateError
from formaflow.core.logging import get_logger
from formaflow.models.enums import AppRole, SessionStatus, TrainingType, ValidationGate
from formaflow.models.training_session import TrainingSession
from formaflow.models.user import User
from formaflow.utils.datetime import now_utc

logger = get_logger(__name__)

GATE_ROLES: dict[ValidationGate, frozenset[AppRole]] = {
    ValidationGate.HR: frozenset({AppRole.HR, AppRole.DRH}),
    ValidationGate.HSE: frozenset({AppRole.HSE}),
}

# (gate, training type) -> (required status, status after approval)
APPROVAL_TRANSITIONS: dict[
    tuple[ValidationGate, TrainingType], tuple[SessionStatus, SessionStatus]
] = {
    (ValidationGate.HR, TrainingType.METIER): (SessionStatus.PLANNED, SessionStatus.VALIDATED_HR),
    (ValidationGate.HR, TrainingType.HSE): (SessionStatus.PLANNED, SessionStatus.AWAITING_HSE),
    (ValidationGate.HSE, TrainingType.HSE): (
        SessionStatus.AWAITING_HSE,
        SessionStatus.VALIDATED_HSE,
    ),
}

TERMINAL_STATUSES = frozenset({SessionStatus.CANCELLED, SessionStatus.COMPLETED})

# Sessions waiting on any gate
PENDING_STATUSES = (SessionStatus.PLANNED, SessionStatus.AWAITING_HSE)

# Sessions that passed every gate they need
VALIDATED_STATUSES = frozenset({SessionStatus.VALIDATED_HR, SessionStatus.VALIDATED_HSE})


def is_terminal(status: SessionStatus | str) -> bool:
    return SessionStatus(status) in TERMINAL_STATUSES


def gate_applies(gate: ValidationGate | str, training_type: TrainingType | str) -> bool:
    """The HSE gate only exists for HSE trainings."""
    return (ValidationGate(gate), TrainingType(training_type)) in APPROVAL_TRANSITIONS


def plan_transition(
    status: SessionStatus | str,
    training_type: TrainingType | str,
    gate: ValidationGate | str,
    approve: bool,
) -> SessionStatus:
    """Compute the status a gate decision leads to.

    Approving and rejecting share one precondition: the session must sit in
    the gate's source status (``planned`` for HR, ``awaiting_hse`` for HSE).
    Approval then advances the session, rejection cancels it.

    Raises:
        InvalidStateError: If the decision is not legal from ``status``
    """
    status = SessionStatus(status)
    training_type = TrainingType(training_type)
    gate = ValidationGate(gate)
    details = {"status": status.value, "type": training_type.value, "gate": gate.value}

    if is_terminal(status):
        raise InvalidStateError(
            f"Session is {status.value}; no further transitions are allowed",
            details=details,
        )

    if not gate_applies(gate, training_type):
        raise InvalidStateError(
            f"{gate.value.upper()} validation does not apply to {training_type.value} trainings",
            details=details,
        )

    required, target = APPROVAL_TRANSITIONS[(gate, training_type)]
    if status != required:
        raise InvalidStateError(
            f"{gate.value.upper()} decision requires status {required.value}, "
            f"session is {status.value}",
            details=details,
        )
    return target if approve else SessionStatus.CANCELLED


def can_act(gate: ValidationGate | str, actor: User) -> bool:
    return actor.has_role(*GATE_ROLES[ValidationGate(gate)])


def check_actor(gate: ValidationGate | str, actor: User) -> None:
    """Raise ForbiddenError unless ``actor`` holds a role for ``gate``."""
    gate = ValidationGate(gate)
    if can_act(gate, actor):
        return

    logger.warning(
        "auth.permission_denied",
        user_id=str(actor.id),
        user_role=actor.role,
        gate=gate.value,
    )
    raise ForbiddenError(
        f"Role {actor.role} cannot decide on the {gate.value.upper()} gate",
        details={
            "gate": gate.value,
            "required_roles": sorted(r.value for r in GATE_ROLES[gate]),
        },
    )


def available_gates(session: TrainingSession, actor: User) -> list[ValidationGate]:
    """Gates ``actor`` may approve or reject on ``session`` right now."""
    gates = []
    for gate in ValidationGate:
        if not can_act(gate, actor):
            continue
        try:
            plan_transition(session.status, session.type, gate, approve=True)
        except InvalidStateError:
            continue
        gates.append(gate)
    return gates


async def list_pending(db: AsyncSession) -> list[TrainingSession]:
    """Snapshot of sessions awaiting a gate, earliest start first."""
    return await TrainingSession.list_by_status(db, PENDING_STATUSES)


async def validate_session(
    db: AsyncSession,
    session: TrainingSession,
    gate: ValidationGate | str,
    approve: bool,
    actor: User,
    expected_version: int | None = None,
    reason: str | None = None,
) -> TrainingSession:
    """Apply a gate decision to ``session`` and commit it.

    Approval stamps ``validated_<gate>_at``/``validated_<gate>_by`` and
    advances the status; rejection only sets ``cancelled``. The audit entry is
    committed in the same transaction, so a returned session is persisted.

    Raises:
        ForbiddenError: Actor has no role for the gate
        ConflictError: ``expected_version`` is stale or a concurrent update won
        InvalidStateError: Decision is not legal from the current status
        DatabaseError: The write failed; the session keeps its prior state
    """
    gate = ValidationGate(gate)
    session_id = str(session.id)

    check_actor(gate, actor)

    if expected_version is not None and expected_version != session.version:
        logger.info(
            "session.validation_conflict",
            session_id=session_id,
            expected_version=expected_version,
            current_version=session.version,
        )
        raise ConflictError(
            "Session was modified since it was read",
            details={"expected_version": expected_version, "current_version": session.version},
        )

    new_status = plan_transition(session.status, session.type, gate, approve)

    old_values = {"status": session.status}
    new_values = {"status": new_status.value}
    if approve:
        stamp_at = f"validated_{gate.value}_at"
        stamp_by = f"validated_{gate.value}_by"
        old_values[stamp_at] = getattr(session, stamp_at)
        old_values[stamp_by] = getattr(session, stamp_by)
        new_values[stamp_at] = now_utc()
        new_values[stamp_by] = actor.id

    for field, value in new_values.items():
        setattr(session, field, value)

    log_session_change(
        db,
        session,
        changed_by=actor.email,
        action=f"{'APPROVE' if approve else 'REJECT'}_{gate.value.upper()}",
        old_values=old_values,
        new_values=new_values,
        reason=reason,
    )

    try:
        await db.flush()
        await db.commit()
    except StaleDataError as exc:
        await db.rollback()
        logger.warning("session.validation_conflict", session_id=session_id, gate=gate.value)
        raise ConflictError(
            "Session was modified by another validator",
            details={"session_id": session_id},
        ) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            "session.validation_db_error",
            session_id=session_id,
            gate=gate.value,
            error=type(exc).__name__,
        )
        raise DatabaseError(
            "Validation could not be saved",
            details={"session_id": session_id},
        ) from exc

    logger.info(
        "session.validated" if approve else "session.rejected",
        session_id=session_id,
        gate=gate.value,
        from_status=old_values["status"],
        to_status=new_status.value,
        actor_id=str(actor.id),
    )
    return session
