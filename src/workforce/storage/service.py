"""Local filesystem store for generated documents and uploads.

Keys are POSIX-style paths relative to the storage root, e.g.
``documents/EXP_7/20260301T101500_Entrega_Uniforme.pdf``.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Callable, Union

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..core.exceptions import NotFoundError, ValidationError

log = get_logger("storage")

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(name: str) -> str:
    """ASCII-only file name without path parts: ``"Nómina enero.pdf"`` -> ``"Nomina_enero.pdf"``."""

    base = Path(str(name or "").replace("\\", "/")).name
    ascii_name = unicodedata.normalize("NFKD", base).encode("ascii", "ignore").decode("ascii")
    cleaned = _UNSAFE.sub("_", ascii_name).strip("._")
    return cleaned or "file"


class LocalStorage:
    def __init__(self, root: Union[str, Path], *, clock: Callable[[], datetime] = now_local):
        self._root = Path(root).resolve()
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        if not key or Path(key).is_absolute():
            raise ValidationError("Clave de archivo no válida")
        path = (self._root / key).resolve()
        if path != self._root and self._root not in path.parents:
            raise ValidationError("Clave de archivo no válida")
        return path

    def save_bytes(self, folder: str, original_name: str, data: bytes) -> str:
        stamp = self._clock().strftime("%Y%m%dT%H%M%S%f")
        parts = [sanitize_filename(p) for p in str(folder or "").replace("\\", "/").split("/") if p.strip()]
        key = "/".join(parts + [f"{stamp}_{sanitize_filename(original_name)}"])

        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        log.info("Stored %s (%d bytes)", key, len(data))
        return key

    def read(self, key: str) -> bytes:
        path = self.path_for(key)
        if not path.is_file():
            raise NotFoundError("Archivo no encontrado")
        return path.read_bytes()

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.is_file():
            return False
        path.unlink()
        return True
