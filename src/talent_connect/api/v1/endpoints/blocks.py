# src/talent_connect/api/v1/endpoints/blocks.py
"""Block list endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from talent_connect.api.v1.dependencies import CurrentUserDep, SessionDep
from talent_connect.schemas.conversation import BlockStatusResponse
from talent_connect.services import profiles
from talent_connect.services.blocks import BlockList

router = APIRouter(prefix="/blocks", tags=["blocks"])


def _status(blocks: BlockList, viewer_id: str, user_id: str) -> BlockStatusResponse:
    block_status = blocks.status(viewer_id, user_id)
    return BlockStatusResponse(
        user_id=user_id,
        has_blocked=block_status.has_blocked,
        is_blocked_by=block_status.is_blocked_by,
    )


@router.get("/{user_id}", response_model=BlockStatusResponse)
async def get_block_status(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BlockStatusResponse:
    """Return whether either side has blocked the other."""
    return _status(BlockList(db), current_user.id, user_id)


@router.put("/{user_id}", response_model=BlockStatusResponse)
async def block_user(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BlockStatusResponse:
    """Block a user; existing history stays visible."""
    profiles.get_profile(db, user_id)
    blocks = BlockList(db)
    blocks.block(current_user.id, user_id)
    return _status(blocks, current_user.id, user_id)


@router.delete("/{user_id}", response_model=BlockStatusResponse)
async def unblock_user(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BlockStatusResponse:
    """Remove the caller's own block on a user."""
    blocks = BlockList(db)
    blocks.unblock(current_user.id, user_id)
    return _status(blocks, current_user.id, user_id)
