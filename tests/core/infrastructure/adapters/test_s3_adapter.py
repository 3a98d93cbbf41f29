import io
import os

import pytest
from botocore.exceptions import ClientError
from core.config import ServiceConfig
from core.infrastructure.adapters.s3_adapter import S3Adapter


@pytest.fixture
def adapter(s3_bucket) -> S3Adapter:
    return S3Adapter(os.environ["IMAGE_S3_BUCKET_NAME"], region_name="us-east-1")


class TestS3Adapter:
    def test_init_missing_bucket(self):
        with pytest.raises(RuntimeError):
            S3Adapter("")

    def test_from_config(self, aws_mock):
        config = ServiceConfig.from_env(
            {"JWT_SECRET": "x" * 32, "STORAGE_BACKEND": "s3", "IMAGE_S3_BUCKET_NAME": "bucket-a"}
        )

        adapter = S3Adapter.from_config(config)

        assert adapter._bucket == "bucket-a"

    def test_upload_and_get_object_success(self, adapter, s3_get_object):
        key = "uploads/tenant_1/a.png"

        adapter.upload_fileobj(key=key, fileobj=io.BytesIO(b"image-bytes"), content_type="image/png")

        assert s3_get_object(key) == b"image-bytes"
        assert adapter.head_object(key=key)["ContentType"] == "image/png"
        assert adapter.get_object(key=key)["Body"].read() == b"image-bytes"

    def test_get_object_missing_key_raises_client_error(self, adapter):
        with pytest.raises(ClientError) as exc:
            adapter.get_object(key="uploads/missing.jpg")

        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_delete_object_success(self, adapter, s3_put_object, s3_get_object):
        key = "uploads/tenant_1/delete.jpg"
        s3_put_object(key, b"data", "image/jpeg")

        adapter.delete_object(key=key)

        with pytest.raises(ClientError) as exc:
            s3_get_object(key)

        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_iter_keys_filters_by_prefix(self, adapter, s3_put_object):
        s3_put_object("uploads/tenant_1/a.png", b"a")
        s3_put_object("uploads/tenant_1/b.png", b"b")
        s3_put_object("uploads/tenant_2/c.png", b"c")

        keys = sorted(adapter.iter_keys(prefix="uploads/tenant_1/"))

        assert keys == ["uploads/tenant_1/a.png", "uploads/tenant_1/b.png"]

    def test_delete_object_bubbles_client_error(self, monkeypatch, adapter):
        def raise_error(**_):
            raise ClientError(
                {"Error": {"Code": "InternalError"}},
                "DeleteObject",
            )

        monkeypatch.setattr(adapter._client, "delete_object", raise_error)

        with pytest.raises(ClientError):
            adapter.delete_object(key="uploads/x.jpg")
