# storage.py

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from tree import OIDTree

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class StorageError(Exception):
    pass


def document_from_tree(tree: OIDTree) -> Dict[str, Any]:
    return tree.to_dict()


def save_document(tree: OIDTree, path: PathLike) -> Path:
    """Write the tree as a JSON document, replacing `path` atomically."""
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(document_from_tree(tree), indent=2, ensure_ascii=False)

    fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", dir=str(dest.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp, dest)
    except OSError as e:
        Path(tmp).unlink(missing_ok=True)
        raise StorageError(f"could not write {dest}: {e}") from e

    logger.info("Saved OID tree to %s", dest)
    return dest


def load_document(path: PathLike) -> Optional[Dict[str, Any]]:
    """Read a saved document; None when nothing has been saved yet.

    The result is untrusted and still has to go through the store's validation.
    """
    src = Path(path)
    if not src.is_file():
        return None
    try:
        data = json.loads(src.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise StorageError(f"could not read {src}: {e}") from e
    logger.info("Read OID tree document from %s", src)
    return data
