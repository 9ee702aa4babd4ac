from __future__ import annotations

"""
Author Index Builder.

Flattens the upstream script tree into a path-to-authors index. Every
directory aggregates the authors of everything below it, so that comments on
a folder-level discussion still reach the people who wrote its scripts.

Files under the designated high-volume subtree are not indexed on their own,
but their authors still flow up into the enclosing directories.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from scriptnotify.domain.constants import DESIGNATED_SUBTREE
from scriptnotify.domain.tree_models import (
    NODE_DIRECTORY,
    NODE_FILE,
    PathAuthorEntry,
    TreeNode,
)

logger = logging.getLogger(__name__)

# Insertion-ordered path -> links table
_Table = Dict[str, List[str]]


@dataclass(frozen=True)
class IndexSummary:
    """
    Aggregate statistics of a built index.

    Attributes:
        total: Number of indexed paths.
        with_authors: Paths carrying at least one author.
        without_authors: Paths with an empty author list.
    """
    total: int
    with_authors: int
    without_authors: int


# ==============================================================================
# PUBLIC API
# ==============================================================================

def build_index(nodes: Iterable[TreeNode]) -> List[PathAuthorEntry]:
    """
    Build the path-to-authors index for a sequence of root nodes.

    Results of all roots are merged by path; on collision the last root
    processed wins.

    Args:
        nodes: Root-level tree nodes.

    Returns:
        List[PathAuthorEntry]: One entry per indexed path, in first-seen order.
    """
    table: _Table = {}
    for root in nodes:
        in_subtree = root.name == DESIGNATED_SUBTREE
        root_table, _ = _collect(root, "", in_subtree)
        table.update(root_table)

    return [PathAuthorEntry(path=p, author_links=links) for p, links in table.items()]


def build_author_mapping(repo_data: Any) -> List[PathAuthorEntry]:
    """
    Build the index from the decoded upstream repository document.

    Args:
        repo_data: Decoded JSON document carrying an 'indexes' list.

    Returns:
        List[PathAuthorEntry]: The index, empty if the document is unusable.
    """
    if not isinstance(repo_data, dict):
        logger.warning(f"Index: Repository document is not an object ({type(repo_data).__name__}).")
        return []

    raw_roots = repo_data.get("indexes")
    if not isinstance(raw_roots, list):
        logger.warning("Index: Repository document has no 'indexes' list.")
        return []

    roots = [TreeNode.from_dict(item) for item in raw_roots if isinstance(item, dict)]
    entries = build_index(roots)
    logger.info(f"Index: Built {len(entries)} path entries from {len(roots)} root node(s).")
    return entries


def summarize_index(entries: Iterable[PathAuthorEntry]) -> IndexSummary:
    """Count indexed paths with and without authors."""
    total = 0
    with_authors = 0
    for entry in entries:
        total += 1
        if entry.author_links:
            with_authors += 1
    return IndexSummary(total=total, with_authors=with_authors, without_authors=total - with_authors)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _collect(node: TreeNode, parent_path: str, in_subtree: bool) -> Tuple[_Table, List[str]]:
    """
    Recursively collect index rows and the author links of a subtree.

    Args:
        node: Current node.
        parent_path: Accumulated path of the parent ('' for roots).
        in_subtree: Whether an ancestor is the designated subtree root.

    Returns:
        Tuple[_Table, List[str]]: Rows emitted by this subtree and the
                                  de-duplicated links to propagate upward.
    """
    table: _Table = {}
    if not node.name:
        return table, []

    node_path = f"{parent_path}/{node.name}" if parent_path else node.name
    in_subtree = in_subtree or parent_path.startswith(DESIGNATED_SUBTREE)

    if node.type == NODE_FILE:
        links = list(dict.fromkeys(node.declared_links()))
        if not in_subtree:
            table[node_path] = links
        return table, links

    if node.type == NODE_DIRECTORY:
        # dict keys double as an insertion-ordered set
        collected: Dict[str, None] = dict.fromkeys(node.declared_links())

        for child in node.children:
            child_table, child_links = _collect(child, node_path, in_subtree)
            table.update(child_table)
            collected.update(dict.fromkeys(child_links))

        links = list(collected)
        table[node_path] = links
        return table, links

    return table, []
