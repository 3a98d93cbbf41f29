"""Parsing of ``multipart/form-data`` bodies carried by API Gateway events."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO

import python_multipart
from aws_lambda_powertools import Logger
from python_multipart.multipart import parse_options_header

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_INVALID_FORM, MAX_FORM_SIZE
from core.utils.request import get_body_bytes, get_header

logger = Logger(UTC=True)

MULTIPART_CONTENT_TYPE = b"multipart/form-data"


@dataclass
class UploadedFile:
    """One file part of a multipart form."""

    field_name: str
    filename: str
    stream: BinaryIO
    size: int


@dataclass
class MultipartForm:
    """Parsed form: plain fields and file parts in body order."""

    fields: dict[str, str] = field(default_factory=dict)
    files: list[UploadedFile] = field(default_factory=list)

    def get_files(self, field_name: str) -> list[UploadedFile]:
        return [item for item in self.files if item.field_name == field_name]

    def close(self) -> None:
        for item in self.files:
            item.stream.close()


def _decode(value: bytes | None) -> str:
    return (value or b"").decode("utf-8", errors="replace")


def _form_error() -> ValidationError:
    return ValidationError(
        message="Failed to parse form",
        error_code=ERROR_CODE_INVALID_FORM,
    )


def parse_multipart_event(event: dict[str, Any]) -> MultipartForm:
    """Parse the multipart body of an API Gateway proxy event.

    Raises:
        ValidationError: If the request is not a well-formed multipart form
            or the body exceeds ``MAX_FORM_SIZE``
    """
    content_type = get_header(event, "Content-Type")
    if not content_type:
        logger.warning("Upload request without Content-Type")
        raise _form_error()

    mime_type, params = parse_options_header(content_type)
    if mime_type != MULTIPART_CONTENT_TYPE or not params.get(b"boundary"):
        logger.warning("Upload request is not multipart", extra={"content_type": content_type})
        raise _form_error()

    try:
        body = get_body_bytes(event)
    except ValueError as exc:
        logger.warning("Upload body is not valid base64")
        raise _form_error() from exc

    if len(body) > MAX_FORM_SIZE:
        logger.warning("Upload body too large", extra={"size": len(body)})
        raise _form_error()

    form = MultipartForm()

    def on_field(part: Any) -> None:
        form.fields[_decode(part.field_name)] = _decode(part.value)

    def on_file(part: Any) -> None:
        stream = part.file_object
        stream.seek(0)
        form.files.append(
            UploadedFile(
                field_name=_decode(part.field_name),
                filename=_decode(part.file_name),
                stream=stream,
                size=part.size,
            )
        )

    headers = {"Content-Type": content_type, "Content-Length": str(len(body))}

    try:
        python_multipart.parse_form(headers, io.BytesIO(body), on_field, on_file)
    except ValueError as exc:
        form.close()
        logger.warning("Malformed multipart body", extra={"error": str(exc)})
        raise _form_error() from exc

    logger.debug(
        "Parsed multipart form",
        extra={"fields": sorted(form.fields), "files": len(form.files)},
    )
    return form
