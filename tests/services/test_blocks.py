# tests/services/test_blocks.py
"""Tests for the block list."""

import pytest

from talent_connect.core.errors import ValidationError
from talent_connect.services.blocks import BlockList


def test_block_is_idempotent(db_session, alice, bob) -> None:
    blocks = BlockList(db_session)
    first = blocks.block(alice.id, bob.id)
    second = blocks.block(alice.id, bob.id)

    assert (first.blocker_id, first.blocked_id) == (second.blocker_id, second.blocked_id)
    assert blocks.blocked_by(alice.id) == [bob.id]


def test_self_block_rejected(db_session, alice) -> None:
    with pytest.raises(ValidationError):
        BlockList(db_session).block(alice.id, alice.id)


def test_block_is_symmetric_in_effect(db_session, alice, bob, carol) -> None:
    blocks = BlockList(db_session)
    blocks.block(alice.id, bob.id)

    assert blocks.is_blocked_either_direction(alice.id, bob.id)
    assert blocks.is_blocked_either_direction(bob.id, alice.id)
    assert not blocks.is_blocked_either_direction(alice.id, carol.id)


def test_status_reports_each_side(db_session, alice, bob) -> None:
    blocks = BlockList(db_session)
    blocks.block(bob.id, alice.id)

    alice_view = blocks.status(alice.id, bob.id)
    bob_view = blocks.status(bob.id, alice.id)

    assert alice_view.has_blocked is False
    assert alice_view.is_blocked_by is True
    assert bob_view.has_blocked is True
    assert bob_view.is_blocked_by is False
    assert alice_view.blocked and bob_view.blocked


def test_unblock_only_removes_own_row(db_session, alice, bob) -> None:
    blocks = BlockList(db_session)
    blocks.block(alice.id, bob.id)
    blocks.block(bob.id, alice.id)

    assert blocks.unblock(alice.id, bob.id) is True
    assert blocks.unblock(alice.id, bob.id) is False
    # Bob's block still stands.
    assert blocks.is_blocked_either_direction(alice.id, bob.id)

    assert blocks.unblock(bob.id, alice.id) is True
    assert not blocks.is_blocked_either_direction(alice.id, bob.id)
