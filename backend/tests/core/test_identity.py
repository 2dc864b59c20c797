"""Identity Model — tests for collective variants, proxies and ledger inheritance."""

import dataclasses
import uuid
from datetime import datetime, timezone

import pytest

from donor_privacy.core.domain_types import ANONYMOUS_NAME, CollectiveId, CollectiveType
from donor_privacy.core.identity import (
    AnonymousProxyCollective,
    HostCollective,
    StandardCollective,
    Transaction,
    collective_of_type,
    is_anonymous,
    new_anonymous_profile,
)
from tests.scenarios import make_order, make_profile, make_user


def test_anonymous_profile_is_owned_by_its_creator():
    user = make_user("u", "ser")
    proxy = new_anonymous_profile(user)
    assert proxy.owner_user_id == user.id
    assert proxy.created_by_user_id == user.id
    assert proxy.type is CollectiveType.ANONYMOUS_PROXY


def test_anonymous_profile_name_is_sentinel_and_slug_is_opaque():
    user = make_user("u", "ser", slug="u-ser")
    proxy = new_anonymous_profile(user)
    assert proxy.name == ANONYMOUS_NAME
    assert "u-ser" not in proxy.slug
    assert proxy.slug != new_anonymous_profile(user).slug


def test_owner_is_fixed_at_creation():
    proxy = new_anonymous_profile(make_user("u", "ser"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        proxy.owner_user_id = make_user("x", "y").id


def test_transaction_inherits_identity_from_order():
    donor = make_user("u", "ser")
    proxy = new_anonymous_profile(donor)
    recipient = make_profile(make_user("c", "ollective"))
    order = make_order(proxy, recipient, donor, 2000)

    tx = Transaction.for_order(order)

    assert tx.order_id == order.id
    assert tx.created_by_user_id == donor.id
    assert tx.from_collective_id == proxy.id
    assert tx.amount == 2000


def test_is_anonymous_only_for_proxy_variant():
    user = make_user("u", "ser")
    assert is_anonymous(new_anonymous_profile(user))
    assert not is_anonymous(make_profile(user))
    assert not is_anonymous(None)


def test_deleted_user_is_not_live():
    user = make_user("gone", "user", deleted_at=datetime.now(timezone.utc))
    assert not user.is_live
    assert make_user("here", "user").is_live


@pytest.mark.parametrize("stored, variant", [
    ("STANDARD", StandardCollective),
    ("HOST", HostCollective),
    ("ANONYMOUS_PROXY", AnonymousProxyCollective),
])
def test_collective_of_type_builds_matching_variant(stored, variant):
    owner = make_user("o", "wner")
    collective = collective_of_type(
        CollectiveType(stored), id=CollectiveId(uuid.uuid4()), slug="s",
        name="n", currency="USD", created_by_user_id=owner.id,
    )
    assert isinstance(collective, variant)
    assert collective.created_by_user_id == owner.id


def test_anonymous_proxy_without_owner_is_rejected():
    with pytest.raises(ValueError):
        collective_of_type(
            CollectiveType.ANONYMOUS_PROXY, id=CollectiveId(uuid.uuid4()),
            slug="s", name="anonymous", currency="USD", created_by_user_id=None,
        )
