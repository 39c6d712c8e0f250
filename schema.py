# schema.py
"""
Boundary schema for OID tree documents.

Anything arriving from outside (an uploaded file, a persisted document, an API
payload) is checked here before it becomes a trusted `OIDTree`. Validation
never raises: callers get a `ValidationResult` naming the first offending
field.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from oids import OID_PATTERN
from tree import OIDNode, OIDTree, TreeMetadata


class OIDNodeSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    oid: str = Field(..., pattern=OID_PATTERN)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    parent: Optional[str] = None
    children: Optional[List[OIDNodeSchema]] = None

    def to_node(self) -> OIDNode:
        return OIDNode(
            id=self.id,
            oid=self.oid,
            name=self.name,
            description=self.description,
            parent=self.parent,
            children=[c.to_node() for c in self.children or []],
        )


class TreeMetadataSchema(BaseModel):
    totalNodes: int = Field(..., ge=0)
    maxDepth: int = Field(..., ge=0)
    lastUpdated: Optional[str] = None


class OIDTreeSchema(BaseModel):
    roots: List[OIDNodeSchema]
    metadata: Optional[TreeMetadataSchema] = None

    def to_tree(self) -> OIDTree:
        meta = None
        if self.metadata is not None:
            meta = TreeMetadata(
                total_nodes=self.metadata.totalNodes,
                max_depth=self.metadata.maxDepth,
                last_updated=self.metadata.lastUpdated,
            )
        return OIDTree(roots=[r.to_node() for r in self.roots], metadata=meta)


class FlatRecordSchema(BaseModel):
    """A single flat record; the OID grammar is left to the builder, which skips bad ones."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    oid: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    parent: Optional[str] = None

    def to_node(self) -> OIDNode:
        return OIDNode(
            id=self.id, oid=self.oid, name=self.name,
            description=self.description, parent=self.parent,
        )


class NodePatchSchema(BaseModel):
    """Fields a node update may carry; a field that is present must hold a valid value."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(None, min_length=1)
    oid: str = Field(None, pattern=OID_PATTERN)
    name: str = Field(None, min_length=1)
    description: Optional[str] = None
    parent: Optional[str] = None


OIDNodeSchema.model_rebuild()


@dataclass
class ValidationResult:
    tree: Optional[OIDTree] = None
    field: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.tree is not None


def describe_error(err: PydanticValidationError, prefix: str = "") -> ValidationResult:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    loc = f"{prefix}{loc}" if loc else (prefix.rstrip(".") or "document")
    return ValidationResult(field=loc, message=f"{loc}: {first.get('msg', 'invalid value')}")


def validate_document(raw: Any) -> ValidationResult:
    """Check `raw` against the tree document schema."""
    if not isinstance(raw, dict):
        return ValidationResult(field="roots", message="roots: document must be an object with a 'roots' list")
    try:
        parsed = OIDTreeSchema.model_validate(raw)
    except PydanticValidationError as e:
        return describe_error(e)
    return ValidationResult(tree=parsed.to_tree())


def validate_patch(patch: Any) -> Tuple[Dict[str, Any], Optional[ValidationResult]]:
    """Check a node patch; returns only the fields it actually sets."""
    try:
        parsed = NodePatchSchema.model_validate(patch)
    except PydanticValidationError as e:
        return {}, describe_error(e)
    return parsed.model_dump(exclude_unset=True), None


def parse_flat_records(records: Any) -> Tuple[List[OIDNode], Optional[ValidationResult]]:
    """Turn raw flat records (mappings or nodes) into `OIDNode`s.

    Only `id`, `oid` and `name` are required; the first record missing one
    yields an error result and no nodes.
    """
    nodes: List[OIDNode] = []
    for i, rec in enumerate(records):
        if isinstance(rec, OIDNode):
            nodes.append(rec)
            continue
        try:
            nodes.append(FlatRecordSchema.model_validate(rec).to_node())
        except PydanticValidationError as e:
            return [], describe_error(e, prefix=f"{i}.")
    return nodes, None
