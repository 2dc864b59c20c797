"""Redaction Projection — tests for the pure sanitized rendering of an EntityGraph.

Tests cover:
    - Each role's view of every anonymous occurrence (member, order, from_collective,
      transaction)
    - Consistency of one owner's redaction across occurrences
    - Non-anonymous members and creators are never redacted
    - Fail-closed rendering for unresolved owners and missing snapshot data
    - The canonical graph is not mutated
"""

import pytest

from donor_privacy.core.domain_types import ANONYMOUS_NAME, Role
from donor_privacy.core.entity_graph import build_entity_graph
from donor_privacy.core.identity import new_anonymous_profile
from donor_privacy.core.redact_graph import redact_graph
from tests.scenarios import build_donation_scenario, make_order, make_user

PERSONAL_FIELDS = ("id", "slug", "email", "first_name", "last_name")


def _view_as(role: Role):
    scenario = build_donation_scenario()
    view = redact_graph(scenario.graph(), {scenario.donor.id: role})
    return scenario, view


def _anonymous_user_nodes(view: dict) -> list[dict]:
    return [
        view["members"][2]["member"]["created_by_user"],
        view["orders"][0]["created_by_user"],
        view["orders"][0]["from_collective"]["created_by_user"],
        view["transactions"][0]["created_by_user"],
    ]


# ─── Per-role disclosure ─────────────────────────────────────────

@pytest.mark.parametrize("role", [Role.PUBLIC, Role.OTHER])
def test_unprivileged_viewers_see_no_owner_identity(role):
    _, view = _view_as(role)
    for node in _anonymous_user_nodes(view):
        assert all(node[f] is None for f in PERSONAL_FIELDS)


@pytest.mark.parametrize("role", [Role.PUBLIC, Role.OTHER])
def test_unprivileged_viewers_see_anonymous_name_and_no_slug(role):
    _, view = _view_as(role)
    for collective in (view["members"][2]["member"], view["orders"][0]["from_collective"]):
        assert collective["name"] == ANONYMOUS_NAME
        assert collective["slug"] is None


@pytest.mark.parametrize("role", [Role.HOST_ADMIN, Role.COLLECTIVE_ADMIN, Role.SELF])
def test_privileged_viewers_see_owner_identity(role):
    scenario, view = _view_as(role)
    for node in _anonymous_user_nodes(view):
        assert node["first_name"] == "u"
        assert node["last_name"] == "ser"
        assert node["email"] == scenario.donor.email


@pytest.mark.parametrize("role", [Role.HOST_ADMIN, Role.COLLECTIVE_ADMIN])
def test_admins_never_see_proxy_slug(role):
    _, view = _view_as(role)
    assert view["members"][2]["member"]["slug"] is None
    assert view["orders"][0]["from_collective"]["slug"] is None


def test_owner_sees_own_slug_but_still_anonymous_name():
    scenario, view = _view_as(Role.SELF)
    member = view["members"][2]["member"]
    assert member["slug"] == scenario.proxy.slug
    assert member["name"] == ANONYMOUS_NAME
    assert view["orders"][0]["from_collective"]["slug"] == scenario.proxy.slug


# ─── Consistency & non-anonymous nodes ───────────────────────────

@pytest.mark.parametrize("role", list(Role))
def test_every_occurrence_of_one_owner_redacts_identically(role):
    _, view = _view_as(role)
    nodes = _anonymous_user_nodes(view)
    assert all(node == nodes[0] for node in nodes)


@pytest.mark.parametrize("role", list(Role))
def test_non_anonymous_members_and_creators_are_never_redacted(role):
    scenario, view = _view_as(role)
    assert view["members"][0]["member"]["created_by_user"]["first_name"] == "admin"
    assert view["members"][1]["member"]["created_by_user"]["first_name"] == "backer"
    assert view["members"][3]["member"]["created_by_user"]["first_name"] == "host"
    assert view["orders"][1]["created_by_user"]["email"] == scenario.backer.email
    assert view["orders"][1]["from_collective"]["slug"] == scenario.backer_profile.slug
    assert view["transactions"][1]["created_by_user"]["last_name"] == "user"


def test_response_shape_is_the_same_for_every_role():
    shapes = set()
    for role in Role:
        _, view = _view_as(role)
        shapes.add(tuple(sorted(view["orders"][0]["created_by_user"])))
    assert len(shapes) == 1


def test_subject_fields_are_rendered():
    scenario, view = _view_as(Role.PUBLIC)
    assert view["id"] == scenario.collective.id
    assert view["slug"] == scenario.collective.slug
    assert view["type"] == "STANDARD"
    assert [m["role"] for m in view["members"]] == ["ADMIN", "BACKER", "BACKER", "HOST"]


# ─── Fail-closed rendering ───────────────────────────────────────

def test_owner_without_resolved_role_is_rendered_public():
    scenario = build_donation_scenario()
    view = redact_graph(scenario.graph(), {})
    assert view["orders"][0]["created_by_user"]["email"] is None
    assert view["members"][2]["member"]["slug"] is None


def test_roles_of_other_owners_do_not_leak_across():
    scenario = build_donation_scenario()
    other_donor = make_user("o", "ther")
    other_proxy = new_anonymous_profile(other_donor)
    other_order = make_order(other_proxy, scenario.collective, other_donor, 100)
    graph = build_entity_graph(
        scenario.collective,
        memberships=scenario.memberships,
        orders=scenario.orders + (other_order,),
        collectives=scenario.collectives + (other_proxy,),
        users=scenario.users + (other_donor,),
    )

    view = redact_graph(graph, {scenario.donor.id: Role.SELF, other_donor.id: Role.OTHER})

    assert view["orders"][0]["from_collective"]["slug"] == scenario.proxy.slug
    assert view["orders"][2]["from_collective"]["slug"] is None
    assert view["orders"][2]["created_by_user"]["first_name"] is None


def test_creator_with_missing_from_collective_is_redacted():
    scenario = build_donation_scenario()
    graph = build_entity_graph(
        scenario.collective,
        orders=(scenario.anonymous_order,),
        users=scenario.users,
    )
    view = redact_graph(graph, {scenario.donor.id: Role.COLLECTIVE_ADMIN})
    assert view["orders"][0]["from_collective"] is None
    assert view["orders"][0]["created_by_user"]["email"] is None


def test_missing_user_renders_null_node():
    scenario = build_donation_scenario()
    graph = build_entity_graph(
        scenario.collective,
        orders=(scenario.public_order,),
        collectives=scenario.collectives,
    )
    view = redact_graph(graph, {})
    assert view["orders"][0]["created_by_user"] is None


def test_proxy_subject_is_rendered_by_the_same_rules():
    scenario = build_donation_scenario()
    graph = build_entity_graph(scenario.proxy, users=scenario.users)

    public = redact_graph(graph, {scenario.donor.id: Role.PUBLIC})
    owner = redact_graph(graph, {scenario.donor.id: Role.SELF})

    assert public["name"] == owner["name"] == ANONYMOUS_NAME
    assert public["slug"] is None
    assert public["created_by_user"]["email"] is None
    assert owner["slug"] == scenario.proxy.slug


# ─── Purity ──────────────────────────────────────────────────────

def test_canonical_graph_is_not_mutated():
    scenario = build_donation_scenario()
    graph = scenario.graph()
    before = (graph.orders, graph.transactions, dict(graph.users), dict(graph.collectives))
    redact_graph(graph, {scenario.donor.id: Role.PUBLIC})
    assert (graph.orders, graph.transactions, dict(graph.users), dict(graph.collectives)) == before
    assert graph.users[scenario.donor.id] == scenario.donor
    assert scenario.donor.email is not None


def test_repeated_projection_is_identical():
    scenario = build_donation_scenario()
    roles = {scenario.donor.id: Role.OTHER}
    assert redact_graph(scenario.graph(), roles) == redact_graph(scenario.graph(), roles)
