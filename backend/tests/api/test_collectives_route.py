"""Collective Route — HTTP-level checks of the redacted collective page.

Tests cover:
    - Viewer header → role → redaction, for anonymous, backer, owner, admin, host admin
    - null (not missing) keys for redacted fields in JSON
    - 404 for unknown slug, 400 for malformed viewer id, 503 envelope on lookup failure
"""

import uuid

import pytest

from donor_privacy.api.routes.collectives import get_repositories
from donor_privacy.main import app
from tests.scenarios import build_donation_scenario

VIEWER_HEADER = "X-Viewer-Id"


async def _get(client, scenario, viewer=None):
    headers = {VIEWER_HEADER: str(viewer.id)} if viewer else {}
    res = await client.get(
        f"/api/v1/collectives/{scenario.collective.slug}", headers=headers,
    )
    assert res.status_code == 200, res.text
    return res.json()


async def test_unauthenticated_page_is_redacted(client, seeded):
    page = await _get(client, seeded)
    order = page["orders"][0]
    assert order["created_by_user"] == {
        "id": None, "slug": None, "email": None,
        "first_name": None, "last_name": None,
    }
    assert order["from_collective"]["name"] == "anonymous"
    assert order["from_collective"]["slug"] is None
    assert page["members"][0]["member"]["created_by_user"]["first_name"] == "admin"
    assert page["members"][1]["member"]["created_by_user"]["first_name"] == "backer"
    assert page["members"][2]["member"]["slug"] is None
    assert page["members"][3]["member"]["created_by_user"]["first_name"] == "host"
    assert page["transactions"][0]["created_by_user"]["email"] is None


async def test_backer_page_is_redacted(client, seeded):
    page = await _get(client, seeded, seeded.backer)
    assert page["orders"][0]["created_by_user"]["first_name"] is None
    assert page["members"][2]["member"]["created_by_user"]["email"] is None


async def test_owner_sees_slug(client, seeded):
    page = await _get(client, seeded, seeded.donor)
    assert page["members"][2]["member"]["slug"] == seeded.proxy.slug
    assert page["members"][2]["member"]["name"] == "anonymous"


@pytest.mark.parametrize("who", ["admin", "host_admin"])
async def test_admins_see_owner_email(client, seeded, who):
    page = await _get(client, seeded, getattr(seeded, who))
    assert page["orders"][0]["created_by_user"]["email"] == seeded.donor.email
    assert page["orders"][0]["from_collective"]["created_by_user"]["last_name"] == "ser"
    assert page["transactions"][0]["created_by_user"]["first_name"] == "u"
    assert page["members"][2]["member"]["slug"] is None


async def test_unknown_slug_is_404(client, seeded):
    res = await client.get("/api/v1/collectives/missing")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_malformed_viewer_id_is_400(client, seeded):
    res = await client.get(
        f"/api/v1/collectives/{seeded.collective.slug}",
        headers={VIEWER_HEADER: "not-a-uuid"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unknown_viewer_is_public(client, seeded):
    res = await client.get(
        f"/api/v1/collectives/{seeded.collective.slug}",
        headers={VIEWER_HEADER: str(uuid.uuid4())},
    )
    assert res.status_code == 200
    assert res.json()["orders"][0]["created_by_user"]["email"] is None


async def test_lookup_failure_returns_error_envelope_only(client):
    scenario = build_donation_scenario()
    failing = scenario.repositories(fail_on=frozenset({"get_membership"}))
    app.dependency_overrides[get_repositories] = failing.bundle

    res = await client.get(
        f"/api/v1/collectives/{scenario.collective.slug}",
        headers={VIEWER_HEADER: str(scenario.admin.id)},
    )

    assert res.status_code == 503
    body = res.json()
    assert body["error"]["code"] == "LOOKUP_FAILURE"
    assert "orders" not in body
