# core/workflow.py
"""
Explicit state machines for the two asset workflows.

Every state change goes through `transfer_transition` / `audit_transition`;
anything not listed in the transition tables raises InvalidTransitionError.
"""
from enum import Enum, IntEnum

from core.errors import InvalidTransitionError


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransferEvent(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class AuditState(IntEnum):
    """Stored as the `confirmed` flag (0/1) on asset_audits."""
    UNCONFIRMED = 0
    CONFIRMED = 1


class AuditEvent(str, Enum):
    CONFIRM = "confirm"


TRANSFER_TRANSITIONS: dict[tuple[TransferStatus, TransferEvent], TransferStatus] = {
    (TransferStatus.PENDING, TransferEvent.APPROVE): TransferStatus.APPROVED,
    (TransferStatus.PENDING, TransferEvent.REJECT): TransferStatus.REJECTED,
}

# Confirming twice is accepted and changes nothing.
AUDIT_TRANSITIONS: dict[tuple[AuditState, AuditEvent], AuditState] = {
    (AuditState.UNCONFIRMED, AuditEvent.CONFIRM): AuditState.CONFIRMED,
    (AuditState.CONFIRMED, AuditEvent.CONFIRM): AuditState.CONFIRMED,
}


def transfer_transition(current: str | TransferStatus, event: TransferEvent) -> TransferStatus:
    """Return the state a transfer moves to, or raise InvalidTransitionError."""
    try:
        state = TransferStatus(current)
    except ValueError as exc:
        raise InvalidTransitionError(f"Unknown transfer state '{current}'") from exc

    target = TRANSFER_TRANSITIONS.get((state, event))
    if target is None:
        raise InvalidTransitionError(
            f"Transfer is {state.value}; cannot {event.value}. It has already been handled."
        )
    return target


def audit_transition(current: int | AuditState, event: AuditEvent) -> AuditState:
    """Return the state an audit moves to, or raise InvalidTransitionError."""
    try:
        state = AuditState(int(current))
    except ValueError as exc:
        raise InvalidTransitionError(f"Unknown audit state '{current}'") from exc

    target = AUDIT_TRANSITIONS.get((state, event))
    if target is None:
        raise InvalidTransitionError(f"Audit cannot {event.value} from state {state.name}")
    return target
