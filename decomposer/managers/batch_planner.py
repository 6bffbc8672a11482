"""
Batch planning for bulk submission of a finished hierarchy.

Only the planning lives here: how many items there are, how large the
batches should be and how the roots are split. Submitting the batches is
left to the caller.
"""

import logging
from typing import List, NamedTuple

from decomposer.constants import DEFAULT_BATCH_THRESHOLDS, DEFAULT_LARGE_BATCH_CONFIG
from decomposer.managers.node_finder import NodeFinder
from decomposer.models.node import WorkItemNode

logger = logging.getLogger(__name__)


class BatchConfig(NamedTuple):
    batch_size: int
    max_concurrent_batches: int
    child_concurrency: int


def calculate_total_work_items(hierarchy: List[WorkItemNode]) -> int:
    """Count every work item in the forest, nested children included."""
    return NodeFinder.count_nodes(hierarchy)


def calculate_optimal_batch_config(total_work_items: int) -> BatchConfig:
    """Pick batch size and concurrency for a number of work items.

    Small hierarchies go out as a single sequential batch; larger ones are
    split and sent with growing concurrency.
    """
    for limit, batch_size, max_concurrent, child_concurrency in DEFAULT_BATCH_THRESHOLDS:
        if total_work_items <= limit:
            return BatchConfig(
                batch_size if batch_size is not None else total_work_items,
                max_concurrent,
                child_concurrency,
            )
    return BatchConfig(*DEFAULT_LARGE_BATCH_CONFIG)


def create_batches(hierarchy: List[WorkItemNode], batch_size: int) -> List[List[WorkItemNode]]:
    """Split the roots into consecutive batches; each root keeps its subtree.

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size <= 0:
        raise ValueError(f"Batch size must be positive, got {batch_size}.")
    batches = [hierarchy[i:i + batch_size] for i in range(0, len(hierarchy), batch_size)]
    logger.debug("Created %d batches from %d root items", len(batches), len(hierarchy))
    return batches
