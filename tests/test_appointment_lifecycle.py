"""Tests for the appointment state machine."""

import pytest

from hernest.core.exceptions import ConflictException, InvalidTransitionException
from hernest.schemas.appointments import AppointmentAction, AppointmentStatus, PaymentStatus
from hernest.services.appointment_lifecycle import (
    DOCTOR_ACTIONS,
    PATIENT_ACTIONS,
    AppointmentState,
    allowed_actions,
    next_state,
)

PENDING = AppointmentState.initial()
CONFIRMED = AppointmentState(AppointmentStatus.CONFIRMED, PaymentStatus.PENDING)
CANCELLED = AppointmentState(AppointmentStatus.CANCELLED, PaymentStatus.PENDING)
PAID = AppointmentState(AppointmentStatus.CONFIRMED, PaymentStatus.COMPLETED)


def test_initial_state() -> None:
    assert PENDING == AppointmentState(AppointmentStatus.PENDING, PaymentStatus.PENDING)


def test_doctor_transitions_from_pending() -> None:
    """Confirm and cancel leave the payment untouched."""
    assert next_state(PENDING, AppointmentAction.CONFIRM) == CONFIRMED
    assert next_state(PENDING, AppointmentAction.CANCEL) == CANCELLED


@pytest.mark.parametrize("state", [CONFIRMED, CANCELLED, PAID])
@pytest.mark.parametrize("action", [AppointmentAction.CONFIRM, AppointmentAction.CANCEL])
def test_doctor_transitions_require_pending(
    state: AppointmentState, action: AppointmentAction
) -> None:
    with pytest.raises(InvalidTransitionException) as exc_info:
        next_state(state, action)
    assert exc_info.value.status_code == 409


@pytest.mark.parametrize("state", [PENDING, CONFIRMED])
def test_pay_confirms_and_completes(state: AppointmentState) -> None:
    assert next_state(state, AppointmentAction.PAY) == PAID


@pytest.mark.parametrize("state", [CANCELLED, PAID])
def test_pay_rejected_for_cancelled_or_paid(state: AppointmentState) -> None:
    with pytest.raises(ConflictException):
        next_state(state, AppointmentAction.PAY)


@pytest.mark.parametrize("state", [CANCELLED, PAID])
def test_pay_any_status_when_allowed(state: AppointmentState) -> None:
    """The permissive mode moves any state to paid."""
    assert next_state(state, AppointmentAction.PAY, allow_payment_any_status=True) == PAID


def test_allowed_actions() -> None:
    """Each party is offered only the transitions that would succeed."""
    assert allowed_actions(PENDING, DOCTOR_ACTIONS) == [
        AppointmentAction.CANCEL,
        AppointmentAction.CONFIRM,
    ]
    assert allowed_actions(CONFIRMED, DOCTOR_ACTIONS) == []
    assert allowed_actions(CONFIRMED, PATIENT_ACTIONS) == [AppointmentAction.PAY]
    assert allowed_actions(CANCELLED, PATIENT_ACTIONS) == []
    assert allowed_actions(CANCELLED, PATIENT_ACTIONS, allow_payment_any_status=True) == [
        AppointmentAction.PAY
    ]
