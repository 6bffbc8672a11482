"""
Utility functions for the decomposer package.
"""

import random
import string
import time
from typing import List, Optional

from decomposer.constants import (
    DEPTH_MARKER,
    TEMP_ID_PREFIX,
    TEMP_ID_SUFFIX_LENGTH,
    TYPE_TITLE_SEPARATOR,
    get_title_prefix,
)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_temp_id() -> str:
    """
    Generate a process-local node id.

    Ids are never sent to the backing system; they only need to be unique
    within the draft tree.

    Returns:
        An id such as "temp-1718000000000-k3j9x0a2b".
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=TEMP_ID_SUFFIX_LENGTH))
    return f"{TEMP_ID_PREFIX}-{int(time.time() * 1000)}-{suffix}"


def default_title(work_item_type: str) -> str:
    """
    Build the default title for a work item type.

    Examples:
        >>> default_title("Task")
        'New Task'
    """
    return f"{get_title_prefix()} {work_item_type}"


def is_default_title(title: Optional[str], work_item_type: str) -> bool:
    """
    Check whether a title is still the default title for a type.

    The match is loose: surrounding whitespace and case are ignored, so
    "  new task " counts as the default title of "Task".
    """
    if title is None:
        return False
    return title.strip().lower() == default_title(work_item_type).lower()


def format_hierarchy_text(nodes: List, depth: int = 0) -> str:
    """
    Serialize a forest back to the dashes / "Type: Title" text format.

    Args:
        nodes: Root nodes (anything with .type, .title and .children).
        depth: Depth of the given nodes.

    Returns:
        One line per node, depth-first, children indented by one more dash.
    """
    lines: List[str] = []

    def _walk(current: List, level: int) -> None:
        for node in current:
            marker = f"{DEPTH_MARKER * level} " if level > 0 else ""
            lines.append(f"{marker}{node.type}{TYPE_TITLE_SEPARATOR} {node.title}")
            if node.children:
                _walk(node.children, level + 1)

    _walk(nodes, depth)
    return "\n".join(lines)
