from __future__ import annotations

"""
Script Repository Tree Data Models.

Provides the recursive node type consumed by the author index builder and
the flat row type of the resulting path-to-authors index.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

NODE_FILE = "file"
NODE_DIRECTORY = "directory"

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AuthorRef:
    """
    A single author declared on a tree node.

    Attributes:
        link: Profile URL of the author. May be blank in upstream data.
    """
    link: str


@dataclass(frozen=True)
class TreeNode:
    """
    Represents one entry (file or directory) of the upstream script tree.

    Attributes:
        name: Path segment of this entry.
        type: Node kind, 'file' or 'directory'. Other values are tolerated.
        authors: Authors declared directly on this entry.
        children: Nested entries (directories only).
    """
    name: str
    type: str
    authors: Tuple[AuthorRef, ...] = ()
    children: Tuple["TreeNode", ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> "TreeNode":
        """
        Build a node from a decoded JSON object without ever raising.

        Malformed fields degrade to empty values so that a corrupt branch
        contributes nothing instead of aborting the whole tree.
        """
        if not isinstance(raw, dict):
            return cls(name="", type="")

        name = raw.get("name")
        node_type = raw.get("type")

        authors: List[AuthorRef] = []
        raw_authors = raw.get("authors")
        if isinstance(raw_authors, list):
            for item in raw_authors:
                if not isinstance(item, dict):
                    continue
                link = item.get("link")
                authors.append(AuthorRef(link=link if isinstance(link, str) else ""))

        children: List[TreeNode] = []
        raw_children = raw.get("children")
        if isinstance(raw_children, list):
            children = [cls.from_dict(c) for c in raw_children if isinstance(c, dict)]

        return cls(
            name=name if isinstance(name, str) else "",
            type=node_type if isinstance(node_type, str) else "",
            authors=tuple(authors),
            children=tuple(children),
        )

    def declared_links(self) -> List[str]:
        """Return the declared author links, dropping blank ones."""
        return [a.link for a in self.authors if a.link and a.link.strip()]


# -----------------------------------------------------------------------------
# INDEX ROWS
# -----------------------------------------------------------------------------

@dataclass
class PathAuthorEntry:
    """
    One row of the persisted author index.

    Attributes:
        path: Slash-joined script path, unique within an index.
        author_links: De-duplicated author profile links.
    """
    path: str
    author_links: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "authorLinks": list(self.author_links)}

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["PathAuthorEntry"]:
        if not isinstance(raw, dict):
            return None
        path = raw.get("path")
        if not isinstance(path, str) or not path:
            return None
        links = raw.get("authorLinks")
        if not isinstance(links, list):
            links = []
        return cls(path=path, author_links=[x for x in links if isinstance(x, str)])
