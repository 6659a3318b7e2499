"""
Pipeline - Block Tree Builder

Recursively materializes a page's block tree up to a depth bound, fetching
sibling subtrees concurrently.
"""

import asyncio
import logging
from typing import List

from pydantic import ValidationError

from notion_export.pipeline.fetcher import BlockFetcher
from notion_export.schemas.block import Block, parse_block
from notion_export.schemas.errors import (
    ApiError,
    BuildError,
    Err,
    FetchFailed,
    MaxDepthExceeded,
    Ok,
    Result,
)


logger = logging.getLogger(__name__)


async def build_block_hierarchy(
    block_id: str,
    fetcher: BlockFetcher,
    max_depth: int,
    current_depth: int = 1,
) -> Result[List[Block], BuildError]:
    """
    Build the subtree of blocks under `block_id`.

    The children of `block_id` sit at `current_depth` (the page's top-level
    blocks are level 1). A child at `max_depth` is returned as a leaf even if
    it reports `has_children`.

    Args:
        block_id: Page or block whose children to fetch
        fetcher: Block fetcher used for every listing
        max_depth: Maximum number of block levels to materialize
        current_depth: Level of the blocks fetched by this call

    Returns:
        Ok(children in listing order) or Err(BuildError). On failure no
        partial tree is returned; the first failing sibling (by position) wins.
    """
    if current_depth > max_depth:
        return Err(MaxDepthExceeded(
            depth=current_depth,
            message=f"Maximum depth of {max_depth} exceeded",
        ))

    fetch_result = await fetcher.fetch_blocks(block_id)
    if isinstance(fetch_result, Err):
        return Err(FetchFailed(
            block_id=block_id,
            message="Failed to fetch blocks",
            cause=fetch_result.error,
        ))

    try:
        blocks = [parse_block(raw) for raw in fetch_result.value]
    except ValidationError as e:
        return Err(ApiError(
            message="Unexpected block shape in API response",
            cause=e,
        ))

    async def attach_children(block: Block) -> Result[Block, BuildError]:
        if not (block.has_children and current_depth < max_depth):
            return Ok(block)

        children_result = await build_block_hierarchy(
            block.id, fetcher, max_depth, current_depth + 1
        )
        if isinstance(children_result, Err):
            return children_result

        block.children = children_result.value
        return Ok(block)

    # Siblings run concurrently; gather keeps listing order regardless of
    # completion order.
    results = await asyncio.gather(*(attach_children(block) for block in blocks))

    for result in results:
        if isinstance(result, Err):
            logger.debug(f"Subtree under {block_id} failed: {result.error}")
            return result

    logger.debug(f"Built {len(blocks)} blocks under {block_id} at depth {current_depth}")
    return Ok([result.value for result in results])
