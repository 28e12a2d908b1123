"""
app/flow/states.py

Purpose: Membership gate states

- UNKNOWN → PENDING → REQUESTED → MEMBER
- Derived from stored data on every update; nothing is cached in-process
- Transition table used to validate and log state changes
"""

from enum import Enum
from typing import Dict, List, Optional

from app.models.join_request import JoinRequest
from app.models.user import User


class MembershipState(str, Enum):
    """
    Where a Telegram user stands with respect to the private channel.
    """

    # No user row yet
    UNKNOWN = "unknown"

    # User exists, not a member, no join request on record
    PENDING = "pending"

    # Join request stored for the main channel
    REQUESTED = "requested"

    # is_member flag set
    MEMBER = "member"


# Chat member statuses that count as being in the channel
MEMBER_STATUSES = ("member", "administrator", "creator")


# Valid state transitions - membership is never revoked by the bot
STATE_TRANSITIONS: Dict[MembershipState, List[MembershipState]] = {
    MembershipState.UNKNOWN: [
        MembershipState.PENDING,
        MembershipState.REQUESTED,  # Join request before first /start
        MembershipState.MEMBER,
    ],
    MembershipState.PENDING: [
        MembershipState.REQUESTED,
        MembershipState.MEMBER,
    ],
    MembershipState.REQUESTED: [
        MembershipState.MEMBER,
    ],
    MembershipState.MEMBER: [],
}


def resolve_membership_state(
    user: Optional[User],
    join_request: Optional[JoinRequest] = None
) -> MembershipState:
    """
    Derives the gate state from stored records.

    The membership flag is checked before the join request so that a
    member always resolves to MEMBER, whatever the request row says.
    """
    if user is None:
        return MembershipState.UNKNOWN
    if user.is_member:
        return MembershipState.MEMBER
    if join_request is not None:
        return MembershipState.REQUESTED
    return MembershipState.PENDING


def is_valid_transition(from_state: MembershipState, to_state: MembershipState) -> bool:
    """
    Checks whether moving between two gate states is allowed.
    Staying in the same state is always valid.
    """
    if from_state == to_state:
        return True
    return to_state in STATE_TRANSITIONS.get(from_state, [])


def is_member_status(status: Optional[str]) -> bool:
    return status in MEMBER_STATUSES
