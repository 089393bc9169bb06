import pytest

from core.errors import InvalidTransitionError, NotFoundError
from core.workflow import (
    AuditEvent,
    AuditState,
    TransferEvent,
    TransferStatus,
    audit_transition,
    transfer_transition,
)


def test_pending_transfer_can_be_approved_or_rejected():
    assert transfer_transition("pending", TransferEvent.APPROVE) is TransferStatus.APPROVED
    assert transfer_transition(TransferStatus.PENDING, TransferEvent.REJECT) is TransferStatus.REJECTED


@pytest.mark.parametrize("state", ["approved", "rejected"])
@pytest.mark.parametrize("event", list(TransferEvent))
def test_terminal_transfer_states_reject_every_event(state, event):
    with pytest.raises(InvalidTransitionError):
        transfer_transition(state, event)


def test_unknown_transfer_state():
    with pytest.raises(InvalidTransitionError):
        transfer_transition("cancelled", TransferEvent.APPROVE)


def test_invalid_transition_reads_as_not_found():
    assert issubclass(InvalidTransitionError, NotFoundError)


def test_audit_confirm_is_one_way_and_idempotent():
    assert audit_transition(0, AuditEvent.CONFIRM) is AuditState.CONFIRMED
    assert audit_transition(AuditState.CONFIRMED, AuditEvent.CONFIRM) is AuditState.CONFIRMED


def test_unknown_audit_state():
    with pytest.raises(InvalidTransitionError):
        audit_transition(7, AuditEvent.CONFIRM)
