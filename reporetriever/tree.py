"""
Selection tree built from the flat path listing of a repository.

The listing returned by the tree endpoint is a flat sequence of ``path`` /
``type`` pairs. ``build_tree`` turns it into an ordered multi-way tree of
directory and file nodes, synthesizing every intermediate directory even
when the listing never mentions it explicitly. The tree only drives
selection and display; fetching works from the flat entries.
"""

from __future__ import annotations
import logging
import posixpath
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

FILE = "file"
DIR = "dir"


@dataclass(frozen=True)
class FileEntry:
    path: str            # slash-separated, relative to the repo root
    type: str = FILE     # "file" | "dir"
    size: Optional[int] = None

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def is_file(self) -> bool:
        return self.type == FILE


@dataclass
class TreeNode:
    name: str
    path: str
    kind: str  # "file" | "dir"
    children: List["TreeNode"] = field(default_factory=list)
    entry: Optional[FileEntry] = None

    @property
    def is_dir(self) -> bool:
        return self.kind == DIR


def build_tree(entries: Iterable[FileEntry]) -> List[TreeNode]:
    """
    Build the ordered list of top-level nodes from a flat entry listing.

    Entries are sorted by path first, so the output does not depend on the
    input order. For every prefix of an entry's path a node is created the
    first time that prefix is seen: a file node if it is the entry's last
    segment and the entry is a file, a directory node otherwise. New nodes
    are attached to their parent prefix once; existing nodes are left alone.

    Collisions keep the first registration. An entry redeclaring a known
    path with another type is ignored, and a path whose parent is a file
    node is dropped; both cases are logged as warnings.
    """
    roots: List[TreeNode] = []
    registry: Dict[str, TreeNode] = {}

    for entry in sorted(entries, key=lambda e: e.path):
        parts = entry.path.split("/")
        current = ""
        for i, part in enumerate(parts):
            parent_path = current
            current = f"{current}/{part}" if current else part
            is_last = i == len(parts) - 1
            kind = FILE if is_last and entry.is_file else DIR

            existing = registry.get(current)
            if existing is not None:
                if is_last and existing.kind != kind:
                    logger.warning(
                        "Path %s already registered as %s, ignoring %s entry",
                        current, existing.kind, entry.type,
                    )
                continue

            parent = registry.get(parent_path) if parent_path else None
            if parent is not None and not parent.is_dir:
                logger.warning("Dropping %s: %s is a file", entry.path, parent.path)
                break

            node = TreeNode(
                name=part,
                path=current,
                kind=kind,
                entry=entry if kind == FILE else None,
            )
            registry[current] = node
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)

    return roots


def iter_nodes(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Pre-order walk over every node of the forest."""
    for node in roots:
        yield node
        yield from iter_nodes(node.children)


def file_paths(roots: Iterable[TreeNode]) -> List[str]:
    return [n.path for n in iter_nodes(roots) if not n.is_dir]


def find_node(roots: Iterable[TreeNode], path: str) -> Optional[TreeNode]:
    for node in iter_nodes(roots):
        if node.path == path:
            return node
    return None


def bytes_human(n: int) -> str:
    """Human-readable bytes: 1 decimal for KiB and above, integer for B."""
    units = ["B", "KiB", "MiB", "GiB", "TiB"]
    f = float(n)
    i = 0
    while f >= 1024.0 and i < len(units) - 1:
        f /= 1024.0
        i += 1
    if i == 0:
        return f"{int(f)} {units[i]}"
    else:
        return f"{f:.1f} {units[i]}"


def render_tree(roots: List[TreeNode], selected: Optional[AbstractSet[str]] = None) -> str:
    """
    Render the forest as a Unicode tree (``├──`` / ``└──`` connectors).

    When ``selected`` is given, file nodes get a ``[x]`` / ``[ ]`` marker.
    Directories are suffixed with ``/`` and files show their size when the
    listing reported one.
    """
    lines: List[str] = []

    def label(node: TreeNode) -> str:
        if node.is_dir:
            return f"{node.name}/"
        text = node.name
        if selected is not None:
            text = f"[{'x' if node.path in selected else ' '}] {text}"
        if node.entry is not None and node.entry.size is not None:
            text += f" ({bytes_human(node.entry.size)})"
        return text

    def rec(nodes: List[TreeNode], prefix: str) -> None:
        n = len(nodes)
        for i, node in enumerate(nodes):
            last = i == n - 1
            lines.append(prefix + ("└── " if last else "├── ") + label(node))
            if node.children:
                rec(node.children, prefix + ("    " if last else "│   "))

    rec(roots, "")
    return "\n".join(lines)
