"""Helpers for reading API Gateway proxy events."""

import base64
import json
from typing import Any

from core.models.errors import ValidationError


def get_header(event: dict[str, Any], name: str) -> str | None:
    """Return a request header, matching its name case-insensitively."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return None


def get_body_bytes(event: dict[str, Any]) -> bytes:
    """Return the raw request body, decoding base64 payloads."""
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body)

    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON object carried by ``event``.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    try:
        raw = get_body_bytes(event) or b"{}"
        body = json.loads(raw)
    except ValueError as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")

    return body
