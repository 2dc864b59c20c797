"""Visibility Policy — declarative field-group table and the can_reveal decision.

Invariants:
    - Decisions are per scalar field, never per object
    - PUBLIC_IDENTITY (proxy slug) is revealed to SELF only
    - PERSONAL_IDENTITY (proxy owner's user fields) is revealed to HOST_ADMIN and above
    - A proxy's name is always the ANONYMOUS_NAME sentinel, for every role
    - Redacted fields keep their key with a None value (response shape preserved)

Design Decisions:
    - One table per rendered node kind: adding a field or group touches one place
    - Thresholds over role lists: the lattice order does the work
"""

from typing import Any, Mapping

from donor_privacy.core.domain_types import ANONYMOUS_NAME, FieldGroup, Role


# ─── Tables ──────────────────────────────────────────────────────

DISCLOSURE_THRESHOLDS: dict[FieldGroup, Role] = {
    FieldGroup.PUBLIC_IDENTITY: Role.SELF,
    FieldGroup.PERSONAL_IDENTITY: Role.HOST_ADMIN,
}

ANONYMOUS_COLLECTIVE_FIELDS: dict[str, FieldGroup] = {
    "slug": FieldGroup.PUBLIC_IDENTITY,
}

ANONYMOUS_COLLECTIVE_MASKS: dict[str, Any] = {
    "name": ANONYMOUS_NAME,
}

ANONYMOUS_OWNER_FIELDS: dict[str, FieldGroup] = {
    "id": FieldGroup.PERSONAL_IDENTITY,
    "slug": FieldGroup.PERSONAL_IDENTITY,
    "email": FieldGroup.PERSONAL_IDENTITY,
    "first_name": FieldGroup.PERSONAL_IDENTITY,
    "last_name": FieldGroup.PERSONAL_IDENTITY,
}


# ─── Decisions ───────────────────────────────────────────────────

def can_reveal(role: Role, field_group: FieldGroup) -> bool:
    return role >= DISCLOSURE_THRESHOLDS[field_group]


def apply_field_policy(
    values: Mapping[str, Any],
    role: Role,
    field_groups: Mapping[str, FieldGroup],
    masks: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a new dict with each governed field revealed, nulled or masked."""
    result = dict(values)
    for name, group in field_groups.items():
        if name in result and not can_reveal(role, group):
            result[name] = None
    for name, sentinel in (masks or {}).items():
        if name in result:
            result[name] = sentinel
    return result
