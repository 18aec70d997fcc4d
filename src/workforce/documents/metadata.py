from __future__ import annotations

import io
import json
from typing import Any, Optional

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError


def read_metadata(pdf_bytes: bytes) -> Optional[dict[str, Any]]:
    """JSON stored in the PDF ``/Subject``; None when absent or not JSON."""

    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        info = reader.metadata
    except (PdfReadError, ValueError, OSError):
        return None
    if not info:
        return None

    subject = info.get("/Subject")
    if not subject:
        return None
    try:
        data = json.loads(str(subject))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
