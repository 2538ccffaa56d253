"""QR payload codec.

The payload is the JSON object ``{"control", "materia", "hora"}`` embedded,
URL-escaped, as the ``data`` query parameter of the image-generation URL.
``decode`` accepts either that full URL or the bare ``data`` value, which is
what the simulated scan feeds back in.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from urllib.parse import parse_qs, quote, unquote, urlsplit

from ..core.constants import CLASS_TIMES, DEFAULT_QR_IMAGE_SIZE, DEFAULT_QR_SERVICE_URL
from ..core.exceptions import MalformedPayloadError

_FIELDS = (("control", "control_number"), ("materia", "subject"), ("hora", "class_time"))


@dataclass(frozen=True)
class QrPayload:
    control_number: str
    subject: str
    class_time: str


def payload_json(control_number: str, subject: str, class_time: str) -> str:
    return json.dumps(
        {"control": control_number, "materia": subject, "hora": class_time},
        ensure_ascii=False,
        separators=(",", ":"),
    )


def encode(
    control_number: str,
    subject: str,
    class_time: str,
    *,
    service_url: str = DEFAULT_QR_SERVICE_URL,
    size: str = DEFAULT_QR_IMAGE_SIZE,
) -> str:
    data = quote(payload_json(control_number, subject, class_time), safe="")
    return f"{service_url}?size={size}&data={data}"


def decode(token: str) -> QrPayload:
    if not token or not token.strip():
        raise MalformedPayloadError("Primero genera un código QR")

    raw = _extract_data(token.strip())
    try:
        obj = json.loads(raw)
    except ValueError:
        raise MalformedPayloadError("El código QR no es válido") from None

    if not isinstance(obj, dict):
        raise MalformedPayloadError("El código QR no es válido")

    values = {}
    for key, attr in _FIELDS:
        value = obj.get(key)
        if not isinstance(value, str) or not value.strip():
            raise MalformedPayloadError(f"El código QR no contiene '{key}'")
        values[attr] = value

    if values["class_time"] not in CLASS_TIMES:
        raise MalformedPayloadError("El código QR tiene una hora de clase no válida")
    return QrPayload(**values)


def _extract_data(token: str) -> str:
    if token.startswith(("http://", "https://")) or "data=" in token:
        query = urlsplit(token).query if "?" in token else token
        params = parse_qs(query, keep_blank_values=True)
        values = params.get("data")
        if not values:
            raise MalformedPayloadError("El código QR no contiene datos")
        # parse_qs already unescaped the value.
        return values[0]
    return unquote(token)
