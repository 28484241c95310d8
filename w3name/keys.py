"""
Key files hold the raw libp2p protobuf encoding of an Ed25519 keypair,
the same bytes accepted by WritableName.from_private_key.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Union

from .name import WritableName

PathLike = Union[str, Path]


def save_key(writable: WritableName, path: PathLike) -> Path:
    """
    Write the keypair to a new file readable only by its owner.

    Raises FileExistsError if `path` already exists; an existing key is never
    replaced.
    """
    path = Path(path)
    if path.parent:
        path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(writable.key_bytes)
    return path


def load_key(path: PathLike) -> WritableName:
    return WritableName.from_private_key(Path(path).read_bytes())
