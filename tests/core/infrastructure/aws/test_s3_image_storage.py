import io
import os

import pytest
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_image_storage import S3ImageStorage


@pytest.fixture
def storage(s3_bucket) -> S3ImageStorage:
    return S3ImageStorage(S3Adapter(os.environ["IMAGE_S3_BUCKET_NAME"], region_name="us-east-1"))


def _failing(operation: str):
    def raise_error(**_):
        raise ClientError({"Error": {"Code": "InternalError"}}, operation)

    return raise_error


class TestJoin:
    @pytest.mark.parametrize(
        ("parts", "expected"),
        [
            (("uploads", "acme", "a.png"), "uploads/acme/a.png"),
            (("./uploads/", "acme"), "uploads/acme"),
            ((".", "acme"), "acme"),
            (("/uploads/profile", "acme", "p.png"), "uploads/profile/acme/p.png"),
        ],
    )
    def test_builds_keys(self, storage, parts, expected):
        assert storage.join(*parts) == expected


class TestS3ImageStorage:
    def test_write_then_read(self, storage, s3_get_object):
        written = storage.write_stream("uploads/acme/a.png", io.BytesIO(b"png-bytes"))

        assert written == len(b"png-bytes")
        assert s3_get_object("uploads/acme/a.png") == b"png-bytes"
        assert storage.read_bytes("uploads/acme/a.png") == b"png-bytes"

    def test_write_sets_content_type(self, storage, s3_bucket):
        storage.write_stream("uploads/acme/a.webp", io.BytesIO(b"x"))

        head = s3_bucket.head_object(Bucket=os.environ["IMAGE_S3_BUCKET_NAME"], Key="uploads/acme/a.webp")
        assert head["ContentType"] == "image/webp"

    def test_exists(self, storage, s3_put_object):
        s3_put_object("uploads/acme/a.png", b"x")

        assert storage.exists("uploads/acme/a.png") is True
        assert storage.exists("uploads/acme/b.png") is False

    def test_read_missing_key(self, storage):
        with pytest.raises(FileNotFoundError):
            storage.read_bytes("uploads/acme/missing.png")

    def test_list_dir_returns_direct_children(self, storage, s3_put_object):
        s3_put_object("uploads/acme/b.png", b"b")
        s3_put_object("uploads/acme/a.png", b"a")
        s3_put_object("uploads/acme/nested/c.png", b"c")
        s3_put_object("uploads/other/d.png", b"d")

        assert storage.list_dir("uploads/acme") == ["a.png", "b.png"]

    def test_list_missing_prefix_is_empty(self, storage):
        assert storage.list_dir("uploads/nobody") == []

    def test_make_dirs_is_noop(self, storage):
        storage.make_dirs("uploads/acme")

        assert storage.list_dir("uploads/acme") == []

    def test_remove(self, storage, s3_put_object):
        s3_put_object("uploads/acme/a.png", b"x")

        storage.remove("uploads/acme/a.png")

        assert storage.exists("uploads/acme/a.png") is False

    def test_client_errors_become_os_errors(self, storage, monkeypatch):
        monkeypatch.setattr(storage._s3._client, "delete_object", _failing("DeleteObject"))
        monkeypatch.setattr(storage._s3._client, "head_object", _failing("HeadObject"))
        monkeypatch.setattr(storage._s3._client, "get_object", _failing("GetObject"))

        with pytest.raises(OSError):
            storage.remove("uploads/acme/a.png")
        with pytest.raises(OSError):
            storage.exists("uploads/acme/a.png")
        with pytest.raises(OSError) as exc:
            storage.read_bytes("uploads/acme/a.png")

        assert not isinstance(exc.value, FileNotFoundError)
