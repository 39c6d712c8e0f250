# store.py
"""
Tree store: the one place that owns the canonical OID forest.

The store keeps the tree together with the view state built on top of it
(selection, expanded nodes, the last search). Loads either fully succeed or
leave the previous tree untouched and record an error message. Mutations
build a new root list instead of editing nodes in place, so a tree value
handed out earlier never changes underneath its holder.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from oids import parse_oid
from schema import parse_flat_records, validate_document, validate_patch
from search import SearchOptions, SearchResult, search_nodes
from tree import (
    OIDNode,
    OIDTree,
    TreeMetadata,
    build_tree,
    find_by_id,
    find_by_oid,
    iter_nodes,
    max_depth,
    with_child,
    with_patch,
    without,
)

logger = logging.getLogger(__name__)

NODE_FIELDS = {f.name for f in fields(OIDNode)}


class StoreState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    ERROR = "error"


class TreeStore:
    def __init__(self, tree: Optional[OIDTree] = None):
        self._lock = threading.RLock()
        self.tree: Optional[OIDTree] = tree
        self.selected_id: Optional[str] = None
        self.search_query: str = ""
        self.search_results: List[SearchResult] = []
        self.expanded: Set[str] = set()
        self.error: Optional[str] = None

    @property
    def state(self) -> StoreState:
        if self.error is not None:
            return StoreState.ERROR
        return StoreState.EMPTY if self.tree is None else StoreState.LOADED

    @property
    def roots(self) -> List[OIDNode]:
        return self.tree.roots if self.tree is not None else []

    # --- Loading ---
    def set_tree(self, tree: OIDTree) -> None:
        with self._lock:
            self.tree = tree
            self.error = None

    def load_from_document(self, raw: Any) -> bool:
        """Validate an untrusted document and make it the canonical tree."""
        result = validate_document(raw)
        if not result.ok:
            logger.warning("Rejected tree document: %s", result.message)
            self.set_error(result.message)
            return False
        self.set_tree(result.tree)
        logger.info("Loaded tree document with %d root(s)", len(result.tree.roots))
        return True

    def load_from_flat(self, records: Iterable[Any]) -> bool:
        """Nest flat records by OID prefix, then load the result like a document."""
        nodes, err = parse_flat_records(list(records))
        if err is not None:
            logger.warning("Rejected flat records: %s", err.message)
            self.set_error(err.message)
            return False

        tree = OIDTree(
            roots=build_tree(nodes),
            metadata=TreeMetadata(
                total_nodes=len(nodes),
                max_depth=max_depth(nodes),
                last_updated=datetime.now(timezone.utc).isoformat(),
            ),
        )
        return self.load_from_document(tree.to_dict())

    def set_error(self, message: Optional[str]) -> None:
        with self._lock:
            self.error = message

    def clear_error(self) -> None:
        self.set_error(None)

    def reset(self) -> None:
        with self._lock:
            self.tree = None
            self.selected_id = None
            self.search_query = ""
            self.search_results = []
            self.expanded = set()
            self.error = None

    # --- View state ---
    def select_node(self, node_id: Optional[str]) -> None:
        # no existence check: an unknown id just selects nothing visible
        with self._lock:
            self.selected_id = node_id

    def toggle_expanded(self, node_id: str) -> bool:
        """Flip `node_id` in the expanded set; returns the new membership."""
        with self._lock:
            # the set is replaced, never mutated, so readers can iterate a snapshot
            if node_id in self.expanded:
                self.expanded = self.expanded - {node_id}
                return False
            self.expanded = self.expanded | {node_id}
            return True

    def expand_all(self) -> None:
        with self._lock:
            if self.tree is None or not self.tree.roots:
                return
            self.expanded = {n.id for n in iter_nodes(self.tree.roots)}

    def collapse_all(self) -> None:
        with self._lock:
            self.expanded = set()

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self.expanded

    # --- Search ---
    def search(self, query: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
        """Run a search, then select the first hit and expand the path leading to it."""
        with self._lock:
            self.search_query = query
            if self.tree is None or not query.strip():
                self.search_results = []
                return []

            results = search_nodes(self.tree.roots, query, options)
            self.search_results = results
            if results:
                first = results[0]
                self.expanded = self.expanded | set(first.path)
                self.selected_id = first.node.id
            return results

    def clear_search(self) -> None:
        with self._lock:
            self.search_query = ""
            self.search_results = []

    # --- Lookup ---
    def find_node(self, node_id: str) -> Optional[OIDNode]:
        return find_by_id(self.roots, node_id)

    def find_node_by_oid(self, oid: str) -> Optional[OIDNode]:
        return find_by_oid(self.roots, oid)

    # --- Mutation ---
    def add_node(self, parent_oid: str, node: OIDNode) -> bool:
        """Append `node` under the node whose OID is `parent_oid`.

        The parent is looked up by OID string, not id, and the child's OID is
        not required to extend it. A missing parent is a silent no-op.
        """
        parse_oid(node.oid)
        if not node.name:
            raise ValueError("node name must not be empty")
        with self._lock:
            if self.tree is None:
                return False
            parent = find_by_oid(self.tree.roots, parent_oid)
            if parent is None:
                logger.debug("add_node: no node with OID %s, nothing added", parent_oid)
                return False
            child = node if node.parent is not None else replace(node, parent=parent.id)
            roots, _ = with_child(self.tree.roots, parent_oid, child)
            self.tree = OIDTree(roots=roots, metadata=self.tree.metadata)
            self.expanded = self.expanded | {parent.id}
            logger.info("Added %s (%s) under %s", node.oid, node.name, parent_oid)
            return True

    def update_node(self, node_id: str, patch: Mapping[str, Any]) -> bool:
        """Shallow-merge `patch` into the node with `node_id`; children survive unless patched.

        Every patched field is checked the way a loaded document would be, so a
        merged node always serializes back into a valid document.
        """
        unknown = set(patch) - NODE_FIELDS
        if unknown:
            raise KeyError(f"unknown node field(s): {', '.join(sorted(unknown))}")
        if "oid" in patch:
            parse_oid(patch["oid"])
        fields_patch = {k: v for k, v in patch.items() if k != "children"}
        merged, err = validate_patch(fields_patch)
        if err is not None:
            raise ValueError(err.message)
        if "children" in patch:
            children = patch["children"]
            if not isinstance(children, list) or not all(isinstance(c, OIDNode) for c in children):
                raise ValueError("children: must be a list of nodes")
            merged["children"] = list(children)

        with self._lock:
            if self.tree is None:
                return False
            roots, hit = with_patch(self.tree.roots, node_id, merged)
            if not hit:
                return False
            self.tree = OIDTree(roots=roots, metadata=self.tree.metadata)
            logger.info("Updated node %s: %s", node_id, ", ".join(sorted(patch)))
            return True

    def remove_node(self, node_id: str) -> Optional[OIDNode]:
        """Drop a node and its subtree; returns the removed node or None."""
        with self._lock:
            if self.tree is None:
                return None
            roots, removed = without(self.tree.roots, node_id)
            if removed is None:
                return None
            gone = {n.id for n in iter_nodes([removed])}
            self.tree = OIDTree(roots=roots, metadata=self.tree.metadata)
            self.expanded = self.expanded - gone
            if self.selected_id in gone:
                self.selected_id = None
            logger.info("Removed %s (%d node(s))", removed.oid, len(gone))
            return removed

    # --- Export ---
    def to_document(self) -> Optional[Dict[str, Any]]:
        return self.tree.to_dict() if self.tree is not None else None

    def view_state(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "state": self.state.value,
                "selectedId": self.selected_id,
                "expanded": sorted(self.expanded),
                "searchQuery": self.search_query,
                "error": self.error,
            }
