from __future__ import annotations

import io

import qrcode

from .payload import QrPayload, payload_json


def render_png(payload: QrPayload, *, box_size: int = 8, border: int = 4) -> bytes:
    """Render the payload JSON as a PNG QR image (local alternative to the remote endpoint)."""

    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload_json(payload.control_number, payload.subject, payload.class_time))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
