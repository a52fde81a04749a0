"""
Booking status workflow

    pending → accepted → in_progress → completed
       └──────────┴──→ cancelled

`completed` and `cancelled` are terminal.
"""

from ...models import Booking, User
from ...shared.errors import AuthorizationError, InvalidStateTransition

PENDING = "pending"
ACCEPTED = "accepted"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

BOOKING_STATUSES = (PENDING, ACCEPTED, IN_PROGRESS, COMPLETED, CANCELLED)
TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED})

CLIENT = "client"
PROVIDER = "provider"

# (from, to) -> sides allowed to trigger it
TRANSITIONS: dict[tuple[str, str], frozenset[str]] = {
    (PENDING, ACCEPTED): frozenset({PROVIDER}),
    (PENDING, CANCELLED): frozenset({PROVIDER, CLIENT}),
    (ACCEPTED, IN_PROGRESS): frozenset({PROVIDER}),
    (ACCEPTED, CANCELLED): frozenset({PROVIDER, CLIENT}),
    (IN_PROGRESS, COMPLETED): frozenset({PROVIDER}),
}


def participant_sides(booking: Booking, user: User) -> frozenset[str]:
    """Which side(s) of the booking the user is on; empty for outsiders"""
    sides = set()
    if booking.client_id == user.id:
        sides.add(CLIENT)
    if booking.provider_id == user.id:
        sides.add(PROVIDER)
    return frozenset(sides)


def allowed_next_statuses(current: str) -> list[str]:
    return [to for (frm, to) in TRANSITIONS if frm == current]


def check_transition(booking: Booking, sides: frozenset[str], new_status: str) -> None:
    """Raise unless ``sides`` may move the booking to ``new_status``"""
    allowed_sides = TRANSITIONS.get((booking.status, new_status))
    if allowed_sides is None:
        raise InvalidStateTransition("booking", booking.status, new_status)

    if not sides & allowed_sides:
        who = " or ".join(sorted(allowed_sides))
        raise AuthorizationError(f"Only the {who} can move a booking to '{new_status}'")
