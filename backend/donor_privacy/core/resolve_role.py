"""Role Decision — pure precedence rules mapping lookup results to a Role.

Invariants:
    - First matching rule wins: PUBLIC, SELF, COLLECTIVE_ADMIN, HOST_ADMIN, OTHER
    - Missing memberships never upgrade privilege (None is evidence of absence)
    - Deterministic: same inputs, same Role
"""

from donor_privacy.core.domain_types import (
    HOST_PRIVILEGED_ROLES,
    MEMBER_ROLE_PRECEDENCE,
    MemberRole,
    Role,
    UserId,
)
from donor_privacy.core.identity import Membership


def decide_role(
    viewer_id: UserId | None,
    target_owner_user_id: UserId | None,
    subject_membership: Membership | None,
    host_membership: Membership | None,
) -> Role:
    if viewer_id is None:
        return Role.PUBLIC
    if target_owner_user_id is not None and viewer_id == target_owner_user_id:
        return Role.SELF
    if subject_membership is not None and subject_membership.role == MemberRole.ADMIN:
        return Role.COLLECTIVE_ADMIN
    if host_membership is not None and host_membership.role in HOST_PRIVILEGED_ROLES:
        return Role.HOST_ADMIN
    return Role.OTHER


def most_privileged(memberships) -> Membership | None:
    """Pick the strongest of several memberships one user holds on one collective."""
    ranked = sorted(
        memberships, key=lambda m: MEMBER_ROLE_PRECEDENCE.index(m.role),
    )
    return ranked[0] if ranked else None
