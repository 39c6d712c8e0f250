"""
Pytest configuration and fixtures for the OID explorer tests.
"""

import pytest

from store import TreeStore
from tree import OIDNode, OIDTree


@pytest.fixture
def flat_nodes() -> list:
    """Three-level chain plus a second root, in input order."""
    return [
        OIDNode(id="1", oid="1", name="Root"),
        OIDNode(id="2", oid="1.2", name="Child"),
        OIDNode(id="3", oid="1.2.3", name="GC"),
        OIDNode(id="4", oid="2", name="Joint"),
    ]


@pytest.fixture
def search_tree() -> list:
    """Roots for the search examples: `1.2` with a single child `1.2.3`."""
    return [
        OIDNode(
            id="n1",
            oid="1.2",
            name="Test Node",
            description="A test node",
            children=[OIDNode(id="n2", oid="1.2.3", name="Child Node", parent="n1")],
        )
    ]


@pytest.fixture
def sample_document() -> dict:
    return {
        "roots": [
            {
                "id": "iso",
                "oid": "1",
                "name": "ISO",
                "description": "International Organization for Standardization",
                "children": [
                    {
                        "id": "iso-member",
                        "oid": "1.2",
                        "name": "ISO Member Body",
                        "children": [
                            {"id": "iso-us", "oid": "1.2.840", "name": "US (ANSI)"},
                        ],
                    },
                    {"id": "iso-org", "oid": "1.3", "name": "ISO Identified Organization"},
                ],
            },
            {"id": "itu-t", "oid": "0", "name": "ITU-T"},
        ],
        "metadata": {"totalNodes": 5, "maxDepth": 2},
    }


@pytest.fixture
def store(sample_document) -> TreeStore:
    s = TreeStore()
    assert s.load_from_document(sample_document)
    return s


@pytest.fixture
def empty_tree() -> OIDTree:
    return OIDTree(roots=[])
