import json
from typing import Any

from handlers.delete_images.handler import handler


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    return json.loads(resp["body"])


def _event(body: Any, token: str | None) -> dict[str, Any]:
    headers = {"Content-Type": "application/json"}
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"
    return {
        "httpMethod": "DELETE",
        "path": "/v1/images",
        "headers": headers,
        "body": body if isinstance(body, str) else json.dumps(body),
    }


class TestDeleteImagesHandler:
    def test_deletes_callers_images(self, local_roots, make_token, lambda_context):
        tenant_dir = local_roots.upload / "tenant_1"
        tenant_dir.mkdir(parents=True)
        (tenant_dir / "a.png").write_bytes(b"a")

        resp = handler(_event({"images": ["a.png", "missing.png"]}, make_token()), lambda_context)

        assert resp["statusCode"] == 200
        assert parse_body(resp)["data"] == {
            "client_id": "tenant_1",
            "deleted": ["a.png"],
            "failed": ["missing.png"],
        }
        assert not (tenant_dir / "a.png").exists()

    def test_tenant_comes_from_token(self, local_roots, make_token, lambda_context):
        other_dir = local_roots.upload / "other"
        other_dir.mkdir(parents=True)
        (other_dir / "a.png").write_bytes(b"a")

        resp = handler(_event({"images": ["a.png"], "client_id": "other"}, make_token()), lambda_context)

        assert parse_body(resp)["data"]["failed"] == ["a.png"]
        assert (other_dir / "a.png").exists()

    def test_missing_token(self, local_roots, lambda_context):
        resp = handler(_event({"images": ["a.png"]}, None), lambda_context)

        assert resp["statusCode"] == 401
        assert parse_body(resp)["error"] == "Missing token"

    def test_invalid_json(self, local_roots, make_token, lambda_context):
        resp = handler(_event("{not json", make_token()), lambda_context)

        assert resp["statusCode"] == 400
        assert parse_body(resp)["error"] == "Invalid JSON body"

    def test_empty_image_list(self, local_roots, make_token, lambda_context):
        resp = handler(_event({"images": []}, make_token()), lambda_context)

        assert resp["statusCode"] == 400
        body = parse_body(resp)
        assert body["error"] == "Invalid request payload"
        assert body["details"]["errors"][0]["field"] == "images"

    def test_missing_images_field(self, local_roots, make_token, lambda_context):
        resp = handler(_event({}, make_token()), lambda_context)

        assert resp["statusCode"] == 400
        assert parse_body(resp)["details"]["errors"][0]["message"] == "This field is required"
