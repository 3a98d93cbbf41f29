"""
Pytest configuration and shared fixtures for image CDN tests.
Provides environment defaults, AWS mocking, storage doubles, token and
multipart event builders.
"""

import base64
import io
import os
from collections.abc import Callable
from datetime import timedelta
from types import SimpleNamespace
from typing import Any, BinaryIO

import boto3
import pytest
import requests
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes!!")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-cdn")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageCdn")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")

from core.repositories.storage_repository import ImageStorageRepository  # noqa: E402
from core.security.token_codec import JWTTokenCodec  # noqa: E402
from core.storage.layout import StorageLayout  # noqa: E402

TEST_TENANT = "tenant_1"


# ============================================================================
# AWS
# ============================================================================


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (reused, moto cleans up on context exit)
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[[str, bytes, str], dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("uploads/tenant_1/a.png", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        return s3_client.put_object(
            Bucket=bucket_name, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("uploads/tenant_1/a.png")
    """

    def _get(key: str) -> bytes:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response: dict[str, Any] = s3_client.get_object(Bucket=bucket_name, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


# ============================================================================
# Storage
# ============================================================================


class InMemoryImageStorage(ImageStorageRepository):
    """Dict-backed storage with switchable failures.

    ``fail_ops`` names operations that raise ``OSError`` for every location;
    ``fail_locations`` makes ``remove`` fail for specific locations only.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = set()
        self.fail_ops: set[str] = set()
        self.fail_locations: set[str] = set()

    def _check(self, op: str) -> None:
        if op in self.fail_ops:
            raise OSError(f"simulated {op} failure")

    def join(self, *parts: str) -> str:
        return "/".join(part.strip("/") for part in parts if part)

    def make_dirs(self, location: str) -> None:
        self._check("make_dirs")
        self.dirs.add(location)

    def list_dir(self, location: str) -> list[str]:
        self._check("list_dir")
        prefix = f"{location}/"
        return sorted(
            key[len(prefix) :]
            for key in self.files
            if key.startswith(prefix) and "/" not in key[len(prefix) :]
        )

    def exists(self, location: str) -> bool:
        self._check("exists")
        return location in self.files

    def write_stream(self, location: str, stream: BinaryIO) -> int:
        self._check("write_stream")
        data = stream.read()
        self.files[location] = data
        return len(data)

    def read_bytes(self, location: str) -> bytes:
        self._check("read_bytes")
        if location not in self.files:
            raise FileNotFoundError(location)
        return self.files[location]

    def remove(self, location: str) -> None:
        self._check("remove")
        if location in self.fail_locations:
            raise PermissionError(location)
        if location not in self.files:
            raise FileNotFoundError(location)
        del self.files[location]


@pytest.fixture
def memory_storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest.fixture
def memory_layout(memory_storage) -> StorageLayout:
    """Layout over in-memory storage with roots ``uploads`` and ``uploads/profile``."""
    return StorageLayout(
        memory_storage,
        upload_root="uploads",
        profile_root="uploads/profile",
    )


@pytest.fixture
def local_roots(tmp_path, monkeypatch) -> SimpleNamespace:
    """Point the service at temporary local roots through the environment."""
    upload_dir = tmp_path / "uploads"
    profile_dir = tmp_path / "uploads" / "profile"

    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("PROFILE_UPLOAD_DIR", str(profile_dir))

    return SimpleNamespace(upload=upload_dir, profile=profile_dir)


# ============================================================================
# Images
# ============================================================================


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """
    Helper to render a small solid-colour image.

    Usage:
        data = make_image_bytes("JPEG", size=(64, 48))
    """

    def _make(fmt: str = "PNG", *, size: tuple[int, int] = (16, 12), color: str = "red") -> bytes:
        mode = "RGBA" if fmt.upper() == "PNG" else "RGB"
        buffer = io.BytesIO()
        Image.new(mode, size, color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


# ============================================================================
# Tokens and events
# ============================================================================


@pytest.fixture
def token_codec() -> JWTTokenCodec:
    return JWTTokenCodec(os.environ["JWT_SECRET"])


@pytest.fixture
def make_token(token_codec) -> Callable[..., str]:
    """
    Helper to sign a token for ``TEST_TENANT`` (or the given claims).

    Usage:
        token = make_token()
        token = make_token({"client_id": "other"}, expires_in=timedelta(seconds=-5))
    """

    def _make(
        claims: dict[str, Any] | None = None,
        *,
        expires_in: timedelta | None = timedelta(hours=1),
    ) -> str:
        payload = {"client_id": TEST_TENANT, "user_id": 7} if claims is None else claims
        return token_codec.encode(payload, expires_in=expires_in)

    return _make


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Helper to build an API Gateway event carrying a multipart form.

    Usage:
        event = multipart_event(
            files=[("images", ("a.png", data, "image/png"))],
            token=make_token(),
        )

    A part whose filename is ``None`` becomes a plain form field.
    """

    def _build(
        *,
        files: list[tuple[str, tuple[Any, ...]]] | None = None,
        fields: dict[str, str] | None = None,
        token: str | None = None,
        path: str = "/v1/upload",
    ) -> dict[str, Any]:
        prepared = requests.Request(
            "POST",
            f"http://localhost{path}",
            files=files or [],
            data=fields or {},
        ).prepare()

        headers = {"Content-Type": prepared.headers["Content-Type"]}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        return {
            "httpMethod": "POST",
            "path": path,
            "headers": headers,
            "body": base64.b64encode(prepared.body or b"").decode("utf-8"),
            "isBase64Encoded": True,
            "requestContext": {"requestId": "api-request-id"},
        }

    return _build
