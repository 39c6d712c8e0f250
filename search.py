from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from tree import OIDNode, iter_nodes, path_to

SEARCH_FIELDS = ("name", "oid", "description")


class MatchType(str, Enum):
    EXACT = "exact"
    NAME = "name"
    OID = "oid"
    DESCRIPTION = "description"


@dataclass
class SearchOptions:
    search_in: Sequence[str] = SEARCH_FIELDS
    case_sensitive: bool = False

    def __post_init__(self):
        unknown = [f for f in self.search_in if f not in SEARCH_FIELDS]
        if unknown:
            raise ValueError(f"cannot search in {unknown}; choose from {list(SEARCH_FIELDS)}")


@dataclass
class SearchResult:
    node: OIDNode
    path: List[str] = field(default_factory=list)
    match_type: MatchType = MatchType.NAME

    def to_dict(self) -> Dict[str, Any]:
        node = self.node.to_dict()
        node.pop("children", None)
        return {"node": node, "path": list(self.path), "matchType": self.match_type.value}


def classify_match(node: OIDNode, query: str, options: SearchOptions) -> Optional[MatchType]:
    """Why `node` matches `query`, first rule wins: exact OID, name, OID substring, description."""
    fold = (lambda s: s) if options.case_sensitive else str.lower
    needle = fold(query)
    fields = options.search_in

    if "oid" in fields and node.oid == query:
        return MatchType.EXACT
    if "name" in fields and needle in fold(node.name):
        return MatchType.NAME
    # OIDs carry no letters, so the raw query is compared as-is
    if "oid" in fields and query in node.oid:
        return MatchType.OID
    if "description" in fields and node.description and needle in fold(node.description):
        return MatchType.DESCRIPTION
    return None


def search_nodes(
    roots: List[OIDNode], query: str, options: Optional[SearchOptions] = None
) -> List[SearchResult]:
    """Scan the forest in pre-order and return every node matching `query`."""
    if not query:
        return []
    options = options or SearchOptions()

    hits: List[SearchResult] = []
    for n in iter_nodes(roots):
        match = classify_match(n, query, options)
        if match is not None:
            hits.append(SearchResult(node=n, path=path_to(roots, n.id), match_type=match))
    return hits
