# registry.py
"""
Enrichment from public OID registries, and user-defined OIDs.

Fetching registry pages lives outside this project: anything that implements
`RegistryLookup` or `ChildrenDiscovery` can be plugged in. What the store
gets from them is optional extra data; the tree is correct without it.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Protocol

from oids import format_oid, is_child_oid, is_valid_oid, oid_sort_key, parse_oid
from store import TreeStore
from tree import OIDNode

logger = logging.getLogger(__name__)

CUSTOM_ARC = "2.16.528.1.1003.3"


class RegistryError(Exception):
    """The registry could not be reached or answered garbage."""


class DuplicateOIDError(ValueError):
    def __init__(self, oid: str):
        self.oid = oid
        super().__init__(f"OID already exists: {oid}")


@dataclass
class RegistryRecord:
    oid: str
    name: str
    description: str = ""
    asn_notation: str = ""
    iri_notation: str = ""


@dataclass
class ChildRecord:
    oid: str
    name: str
    description: str = ""


class RegistryLookup(Protocol):
    def lookup(self, oid: str) -> Optional[RegistryRecord]:
        """Registry entry for `oid`, or None when the registry has none."""


class ChildrenDiscovery(Protocol):
    def children(self, parent_oid: str) -> List[ChildRecord]:
        """Presumed direct children of `parent_oid`; may be empty."""


def enrich_node(store: TreeStore, node_id: str, registry: RegistryLookup) -> Optional[RegistryRecord]:
    node = store.find_node(node_id)
    if node is None:
        return None
    try:
        record = registry.lookup(node.oid)
    except RegistryError as e:
        logger.warning("Registry lookup for %s failed: %s", node.oid, e)
        return None
    if record is None:
        logger.info("Registry has no entry for %s", node.oid)
        return None

    patch = {}
    # the registry echoes the OID back as name when it has nothing better
    if record.name and record.name != node.oid:
        patch["name"] = record.name
    if record.description:
        patch["description"] = record.description
    if patch:
        store.update_node(node_id, patch)
    return record


def import_children(store: TreeStore, parent_id: str, discovery: ChildrenDiscovery) -> List[OIDNode]:
    """Add registry-listed children of a node that the tree does not know yet."""
    parent = store.find_node(parent_id)
    if parent is None:
        return []
    try:
        records = discovery.children(parent.oid)
    except RegistryError as e:
        logger.warning("Child discovery for %s failed: %s", parent.oid, e)
        return []

    direct = [
        r for r in records
        if is_valid_oid(r.oid) and is_child_oid(r.oid, parent.oid) and "." not in r.oid[len(parent.oid) + 1:]
    ]
    added: List[OIDNode] = []
    seen = set()
    for rec in sorted(direct, key=lambda r: oid_sort_key(r.oid)):
        if rec.oid in seen or store.find_node_by_oid(rec.oid) is not None:
            continue
        seen.add(rec.oid)
        node = OIDNode(
            id=f"imported-{rec.oid}",
            oid=rec.oid,
            name=rec.name or rec.oid,
            description=rec.description or None,
            parent=parent.id,
        )
        if store.add_node(parent.oid, node):
            added.append(node)

    logger.info("Imported %d of %d listed children under %s", len(added), len(records), parent.oid)
    return added


def create_custom_oid(
    store: TreeStore,
    arc: str,
    name: str,
    description: Optional[str] = None,
    parent_oid: str = CUSTOM_ARC,
) -> Optional[OIDNode]:
    """Register `parent_oid.arc` under the personal namespace.

    Returns None, adding nothing, when `parent_oid` is not in the tree.
    """
    full_oid = format_oid(parse_oid(f"{parent_oid}.{arc}"))
    name = (name or "").strip()
    if not name:
        raise ValueError("a custom OID needs a name")
    if store.find_node_by_oid(full_oid) is not None:
        raise DuplicateOIDError(full_oid)

    node = OIDNode(
        id=f"custom-{uuid.uuid4().hex[:12]}",
        oid=full_oid,
        name=name,
        description=(description or "").strip() or None,
    )
    if not store.add_node(parent_oid, node):
        return None
    return store.find_node(node.id)
