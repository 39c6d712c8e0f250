# oids.py

import re
from typing import List, Optional, Sequence, Tuple

OID_PATTERN = r"^([0-9]+\.)*[0-9]+$"
RE_OID = re.compile(OID_PATTERN)


class FormatError(ValueError):
    """Raised when a string is not a dot-separated sequence of non-negative integers."""

    def __init__(self, oid: str, reason: str = "invalid OID"):
        self.oid = oid
        super().__init__(f"{reason}: {oid!r}")


def is_valid_oid(oid: str) -> bool:
    return isinstance(oid, str) and RE_OID.fullmatch(oid) is not None


def parse_oid(oid: str) -> List[int]:
    if not isinstance(oid, str):
        raise FormatError(repr(oid), "OID must be a string")
    if not oid:
        raise FormatError(oid, "empty OID")
    parts = oid.split(".")
    for p in parts:
        if not p:
            raise FormatError(oid, "empty segment in OID")
        if not (p.isascii() and p.isdigit()):
            raise FormatError(oid, "non-numeric segment in OID")
    return [int(p) for p in parts]


def format_oid(segments: Sequence[int]) -> str:
    if not segments:
        raise FormatError("", "empty OID")
    for s in segments:
        if s < 0:
            raise FormatError(".".join(str(x) for x in segments), "negative arc in OID")
    return ".".join(str(s) for s in segments)


def is_child_oid(candidate: str, ancestor: str) -> bool:
    """True when `ancestor` is a strict segment prefix of `candidate`."""
    return candidate.startswith(ancestor + ".")


def parent_oid(oid: str) -> Optional[str]:
    parse_oid(oid)
    head, sep, _ = oid.rpartition(".")
    return head if sep else None


def oid_depth(oid: str) -> int:
    return len(parse_oid(oid)) - 1


def oid_sort_key(oid: str) -> Tuple[int, ...]:
    # unparseable values sort last
    try:
        return tuple(parse_oid(oid))
    except FormatError:
        return (10**9,)
