from unittest.mock import patch

import pytest

from core.models.errors import ValidationError
from core.utils.multipart import parse_multipart_event


class TestParseMultipartEvent:
    def test_files_keep_body_order(self, multipart_event) -> None:
        event = multipart_event(
            files=[
                ("images", ("first.png", b"one", "image/png")),
                ("images", ("second.jpg", b"second", "image/jpeg")),
                ("other", ("x.webp", b"x", "image/webp")),
            ]
        )

        form = parse_multipart_event(event)
        images = form.get_files("images")

        assert [f.filename for f in images] == ["first.png", "second.jpg"]
        assert [f.stream.read() for f in images] == [b"one", b"second"]
        assert [f.size for f in images] == [3, 6]
        assert len(form.get_files("other")) == 1

    def test_plain_fields_are_not_files(self, multipart_event) -> None:
        event = multipart_event(files=[("note", (None, "hello"))])

        form = parse_multipart_event(event)

        assert form.files == []
        assert form.fields == {"note": "hello"}

    def test_header_lookup_is_case_insensitive(self, multipart_event) -> None:
        event = multipart_event(files=[("image", ("a.png", b"data", "image/png"))])
        event["headers"] = {"content-type": event["headers"]["Content-Type"]}

        form = parse_multipart_event(event)

        assert form.get_files("image")[0].filename == "a.png"

    def test_close_closes_streams(self, multipart_event) -> None:
        form = parse_multipart_event(
            multipart_event(files=[("images", ("a.png", b"data", "image/png"))])
        )

        form.close()

        assert form.files[0].stream.closed

    def test_missing_content_type(self) -> None:
        with pytest.raises(ValidationError, match="Failed to parse form"):
            parse_multipart_event({"headers": {}, "body": ""})

    def test_json_content_type_is_rejected(self) -> None:
        event = {"headers": {"Content-Type": "application/json"}, "body": "{}"}

        with pytest.raises(ValidationError) as exc:
            parse_multipart_event(event)

        assert exc.value.error_code == "INVALID_FORM"

    def test_invalid_base64_body(self, multipart_event) -> None:
        event = multipart_event(files=[("images", ("a.png", b"data", "image/png"))])
        event["body"] = "***not-base64***"

        with pytest.raises(ValidationError):
            parse_multipart_event(event)

    def test_oversized_body(self, multipart_event) -> None:
        event = multipart_event(files=[("images", ("a.png", b"x" * 64, "image/png"))])

        with patch("core.utils.multipart.MAX_FORM_SIZE", 10):
            with pytest.raises(ValidationError):
                parse_multipart_event(event)
