"""Domain Types — identifiers, closed enumerations and the privilege lattice.

Invariants:
    - UserId, CollectiveId, MembershipId, OrderId, TransactionId wrap UUIDs
    - Role is totally ordered: PUBLIC < OTHER < HOST_ADMIN < COLLECTIVE_ADMIN < SELF
    - All valid states encoded as Enums, no raw string matching at call sites

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log extras without custom encoders
    - Role ordering defined by an explicit rank table, not by member declaration order
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
CollectiveId = NewType("CollectiveId", UUID)
MembershipId = NewType("MembershipId", UUID)
OrderId = NewType("OrderId", UUID)
TransactionId = NewType("TransactionId", UUID)


# ─── Constants ───────────────────────────────────────────────────

ANONYMOUS_NAME = "anonymous"


# ─── Enums ───────────────────────────────────────────────────────

class CollectiveType(str, Enum):
    """Collective variants, mapped to DB `type` column."""
    STANDARD = "STANDARD"
    ANONYMOUS_PROXY = "ANONYMOUS_PROXY"
    HOST = "HOST"


class MemberRole(str, Enum):
    """Role a membership grants over a collective."""
    ADMIN = "ADMIN"
    BACKER = "BACKER"
    HOST_ADMIN = "HOST_ADMIN"
    MEMBER = "MEMBER"
    HOST = "HOST"


class FieldGroup(str, Enum):
    """Groups of scalar fields that share one disclosure threshold."""
    PUBLIC_IDENTITY = "public_identity"
    PERSONAL_IDENTITY = "personal_identity"


class Role(str, Enum):
    """Viewer privilege relative to a subject collective."""
    PUBLIC = "PUBLIC"
    OTHER = "OTHER"
    HOST_ADMIN = "HOST_ADMIN"
    COLLECTIVE_ADMIN = "COLLECTIVE_ADMIN"
    SELF = "SELF"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank


_ROLE_RANK = {
    Role.PUBLIC: 0,
    Role.OTHER: 1,
    Role.HOST_ADMIN: 2,
    Role.COLLECTIVE_ADMIN: 3,
    Role.SELF: 4,
}

# Membership roles on the subject's host that grant HOST_ADMIN
HOST_PRIVILEGED_ROLES = frozenset({MemberRole.ADMIN, MemberRole.HOST_ADMIN})

# Tie-break when one user holds several memberships on the same collective
MEMBER_ROLE_PRECEDENCE = (
    MemberRole.ADMIN,
    MemberRole.HOST_ADMIN,
    MemberRole.HOST,
    MemberRole.MEMBER,
    MemberRole.BACKER,
)
