# tree.py
"""
OID forest types plus the builder and navigation helpers over them.

Nodes are plain dataclasses; a tree is a list of roots (ITU-T `0`, ISO `1` and
joint `2` live side by side). Everything here is read-only over its input:
the rebuild helpers at the bottom return new root lists and leave the
originals intact.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from oids import is_valid_oid, oid_depth, parent_oid

logger = logging.getLogger(__name__)


@dataclass
class OIDNode:
    id: str
    oid: str
    name: str
    description: Optional[str] = None
    parent: Optional[str] = None
    children: List[OIDNode] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return oid_depth(self.oid)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "oid": self.oid, "name": self.name}
        if self.description is not None:
            out["description"] = self.description
        if self.parent is not None:
            out["parent"] = self.parent
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


@dataclass
class TreeMetadata:
    total_nodes: int = 0
    max_depth: int = 0
    last_updated: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"totalNodes": self.total_nodes, "maxDepth": self.max_depth}
        if self.last_updated is not None:
            out["lastUpdated"] = self.last_updated
        return out


@dataclass
class OIDTree:
    roots: List[OIDNode] = field(default_factory=list)
    metadata: Optional[TreeMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"roots": [r.to_dict() for r in self.roots]}
        if self.metadata is not None:
            out["metadata"] = self.metadata.to_dict()
        return out


# ==========================
# Builder
# ==========================
def build_tree(flat_nodes: Iterable[OIDNode]) -> List[OIDNode]:
    """Nest a flat list of nodes by OID prefix; orphans become extra roots."""
    copies: List[OIDNode] = []
    by_oid: Dict[str, OIDNode] = {}
    for n in flat_nodes:
        if not is_valid_oid(n.oid):
            logger.debug("Skipping record %r with malformed OID %r", n.id, n.oid)
            continue
        node = replace(n, children=[])
        copies.append(node)
        by_oid.setdefault(node.oid, node)

    roots: List[OIDNode] = []
    for node in copies:
        parent = by_oid.get(parent_oid(node.oid) or "")
        if parent is not None:
            parent.children.append(node)
            node.parent = parent.id
        else:
            roots.append(node)
    return roots


# ==========================
# Navigator
# ==========================
def iter_nodes(roots: Iterable[OIDNode]) -> Iterator[OIDNode]:
    """Pre-order walk: each node is followed by its whole subtree before its next sibling."""
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def flatten(roots: Iterable[OIDNode]) -> List[OIDNode]:
    return list(iter_nodes(roots))


def find_by_id(roots: Iterable[OIDNode], node_id: str) -> Optional[OIDNode]:
    return next((n for n in iter_nodes(roots) if n.id == node_id), None)


def find_by_oid(roots: Iterable[OIDNode], oid: str) -> Optional[OIDNode]:
    return next((n for n in iter_nodes(roots) if n.oid == oid), None)


def path_to(roots: Iterable[OIDNode], node_id: str) -> List[str]:
    """Ids from a root down to `node_id` inclusive; empty when it is absent."""
    path: List[str] = []

    def _walk(nodes: Iterable[OIDNode]) -> bool:
        for n in nodes:
            path.append(n.id)
            if n.id == node_id or _walk(n.children):
                return True
            path.pop()
        return False

    _walk(roots)
    return path


def count_nodes(roots: Iterable[OIDNode]) -> int:
    return sum(1 for _ in iter_nodes(roots))


def max_depth(nodes: Iterable[OIDNode]) -> int:
    depths = [oid_depth(n.oid) for n in nodes if is_valid_oid(n.oid)]
    return max(depths) if depths else 0


# ==========================
# Rebuild helpers
# ==========================
def _rebuild(
    nodes: List[OIDNode], match: Callable[[OIDNode], bool], change: Callable[[OIDNode], Optional[OIDNode]]
) -> Tuple[List[OIDNode], bool]:
    # Copies only the nodes on the path to the first match; `change` returning
    # None drops the matched node from its sibling list.
    for i, n in enumerate(nodes):
        if match(n):
            new = change(n)
            head, tail = nodes[:i], nodes[i + 1:]
            return (head + [new] + tail if new is not None else head + tail), True
        kids, hit = _rebuild(n.children, match, change)
        if hit:
            return nodes[:i] + [replace(n, children=kids)] + nodes[i + 1:], True
    return nodes, False


def with_child(roots: List[OIDNode], parent_oid_str: str, child: OIDNode) -> Tuple[List[OIDNode], Optional[OIDNode]]:
    """Append `child` under the first node whose OID equals `parent_oid_str`."""
    found: List[OIDNode] = []

    def _append(n: OIDNode) -> OIDNode:
        found.append(n)
        return replace(n, children=n.children + [child])

    new_roots, _ = _rebuild(roots, lambda n: n.oid == parent_oid_str, _append)
    return new_roots, (found[0] if found else None)


def with_patch(roots: List[OIDNode], node_id: str, patch: Dict[str, Any]) -> Tuple[List[OIDNode], bool]:
    return _rebuild(roots, lambda n: n.id == node_id, lambda n: replace(n, **patch))


def without(roots: List[OIDNode], node_id: str) -> Tuple[List[OIDNode], Optional[OIDNode]]:
    removed: List[OIDNode] = []

    def _drop(n: OIDNode) -> None:
        removed.append(n)
        return None

    new_roots, _ = _rebuild(roots, lambda n: n.id == node_id, _drop)
    return new_roots, (removed[0] if removed else None)
