from __future__ import annotations

import io
import json
from datetime import datetime
from typing import Any

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def build_payload(kind: str, employee_id: int, at: datetime, **extra: Any) -> str:
    """Compact JSON embedded in the QR and in the PDF ``/Subject``: ``{"t", "eid", "d", ...}``."""

    data: dict[str, Any] = {"t": kind}
    data.update({k: v for k, v in extra.items() if v is not None})
    data["eid"] = int(employee_id)
    data["d"] = at.isoformat(timespec="seconds")
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def qr_png(payload: str) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=4,
        border=1,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
