"""QR image helpers for student identity payloads."""

from __future__ import annotations

import io
import json
from typing import Optional

import qrcode
from PIL import Image

from ..core.constants import QR_DELIMITER
from ..identity.model import ScannedIdentity


def encode_payload(identity: ScannedIdentity, *, as_json: bool = False) -> str:
    """Pipe string ``studentId|fullName|gradeLevel|section|schoolId`` (or JSON)."""
    if as_json:
        return json.dumps(identity.to_dict(), ensure_ascii=False)
    return QR_DELIMITER.join(
        [
            identity.student_id,
            identity.full_name,
            str(identity.grade_level),
            identity.section,
            identity.school_id,
        ]
    )


def render_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_image(stream) -> Optional[str]:
    """Return the text of the first QR code found in an image, or None."""
    # pyzbar loads the native zbar library on import.
    from pyzbar.pyzbar import decode as pyzbar_decode

    img = Image.open(stream).convert("RGB")
    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8").strip()
