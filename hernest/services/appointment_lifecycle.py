"""Appointment state machine.

An appointment has two axes, ``status`` and ``payment_status``. Doctors move
a pending appointment to confirmed or cancelled; the patient's payment moves
it to (confirmed, completed).
"""

from dataclasses import dataclass

from hernest.core.exceptions import InvalidTransitionException
from hernest.schemas.appointments import AppointmentAction, AppointmentStatus, PaymentStatus

DOCTOR_ACTIONS = frozenset({AppointmentAction.CONFIRM, AppointmentAction.CANCEL})
PATIENT_ACTIONS = frozenset({AppointmentAction.PAY})


@dataclass(frozen=True)
class AppointmentState:
    """Combined state of an appointment."""

    status: AppointmentStatus
    payment_status: PaymentStatus

    @classmethod
    def initial(cls) -> "AppointmentState":
        return cls(AppointmentStatus.PENDING, PaymentStatus.PENDING)


def next_state(
    state: AppointmentState,
    action: AppointmentAction,
    allow_payment_any_status: bool = False,
) -> AppointmentState:
    """
    Apply an action to a state.

    Args:
        state: Current state
        action: Requested action
        allow_payment_any_status: Accept payment regardless of the prior state

    Returns:
        The resulting state

    Raises:
        InvalidTransitionException: If the action is not allowed from ``state``
    """
    if action in DOCTOR_ACTIONS:
        if state.status != AppointmentStatus.PENDING:
            raise InvalidTransitionException(
                action.value, state.status.value, state.payment_status.value
            )
        target = (
            AppointmentStatus.CONFIRMED
            if action == AppointmentAction.CONFIRM
            else AppointmentStatus.CANCELLED
        )
        return AppointmentState(target, state.payment_status)

    if action == AppointmentAction.PAY:
        if not allow_payment_any_status and (
            state.status == AppointmentStatus.CANCELLED
            or state.payment_status == PaymentStatus.COMPLETED
        ):
            raise InvalidTransitionException(
                action.value, state.status.value, state.payment_status.value
            )
        return AppointmentState(AppointmentStatus.CONFIRMED, PaymentStatus.COMPLETED)

    raise ValueError(f"Unknown appointment action: {action}")


def allowed_actions(
    state: AppointmentState,
    actions: frozenset[AppointmentAction],
    allow_payment_any_status: bool = False,
) -> list[AppointmentAction]:
    """Subset of ``actions`` that may be applied to ``state``."""
    allowed = []
    for action in sorted(actions, key=lambda a: a.value):
        try:
            next_state(state, action, allow_payment_any_status)
        except InvalidTransitionException:
            continue
        allowed.append(action)
    return allowed
