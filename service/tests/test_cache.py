"""PDF cache keys, TTL and replacement, over local and S3 storage."""

import io

import pytest
from botocore.exceptions import ClientError

from docgen.schemas.pdf import PDFOptions
from docgen.services.pdf.cache import PAGE_COUNT_KEY, PDFCache, key_prefix
from docgen.services.pdf.storage import (
    CREATED_AT_KEY,
    ArtifactStorage,
    LocalArtifactStorage,
    S3ArtifactStorage,
    create_storage,
)

from conftest import fake_pdf


class Clock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


class BrokenStorage(ArtifactStorage):
    def _read(self, key):
        raise OSError("disk gone")

    def _write(self, key, data, metadata):
        raise OSError("disk gone")

    def _delete(self, key):
        raise OSError("disk gone")

    def _delete_prefix(self, prefix):
        raise OSError("disk gone")


class FakeS3Client:
    """Just enough of the boto3 S3 client for the storage backend."""

    def __init__(self):
        self.objects = {}

    def get_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "Not Found"}}, "GetObject")
        body, metadata = self.objects[Key]
        return {"Body": io.BytesIO(body), "Metadata": metadata}

    def put_object(self, Bucket, Key, Body, ContentType, Metadata):
        self.objects[Key] = (Body, Metadata)

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)

    def list_objects_v2(self, Bucket, Prefix):
        return {"Contents": [{"Key": key} for key in self.objects if key.startswith(Prefix)]}

    def delete_objects(self, Bucket, Delete):
        for item in Delete["Objects"]:
            self.objects.pop(item["Key"], None)


class TestKeys:

    def test_same_inputs_same_key(self):
        content = {"projectName": "Apollo", "items": [1, 2]}
        first = PDFCache.build_key("u1", "d1", "backlog", content, PDFOptions())
        second = PDFCache.build_key("u1", "d1", "backlog", {"items": [1, 2], "projectName": "Apollo"}, PDFOptions())
        assert first == second

    def test_layout(self):
        key = PDFCache.build_key(None, None, "risk_register", {})
        assert key.startswith("anonymous/adhoc/risk_register_")
        assert key.endswith(".pdf")
        assert len(key.rsplit("_", 1)[1]) == len("12345678.pdf")

    def test_content_and_options_change_key(self):
        base = PDFCache.build_key("u1", "d1", "charter", {"scope": "A"}, PDFOptions())
        assert PDFCache.build_key("u1", "d1", "charter", {"scope": "B"}, PDFOptions()) != base
        assert PDFCache.build_key("u1", "d1", "charter", {"scope": "A"}, PDFOptions(show_draft=True)) != base
        assert PDFCache.build_key("u1", "d1", "charter", {"scope": "A"}, PDFOptions(), {"project_name": "X"}) != base

    def test_cache_controls_do_not_change_key(self):
        base = PDFCache.build_key("u1", "d1", "charter", {}, PDFOptions())
        assert PDFCache.build_key("u1", "d1", "charter", {}, PDFOptions(force_regenerate=True)) == base

    def test_unsafe_segments_cleaned(self):
        key = PDFCache.build_key("../evil", "a b", "charter", {})
        assert ".." not in key
        assert key.startswith("evil/a-b/charter_")

    def test_prefix(self):
        assert key_prefix("u1/d1/charter_abcd1234.pdf") == "u1/d1/charter_"


class TestLocalCache:

    @pytest.fixture
    def clock(self):
        return Clock()

    @pytest.fixture
    def local_cache(self, tmp_path, clock):
        return PDFCache(LocalArtifactStorage(tmp_path), ttl_seconds=3600, clock=clock)

    async def test_miss_then_hit(self, local_cache):
        key = PDFCache.build_key("u1", "d1", "backlog", {})
        assert await local_cache.get(key) is None

        assert await local_cache.put(key, fake_pdf(3), page_count=3)
        hit = await local_cache.get(key)
        assert hit.data == fake_pdf(3)
        assert hit.page_count == 3

    async def test_expired_entry_deleted(self, local_cache, clock, tmp_path):
        key = PDFCache.build_key("u1", "d1", "backlog", {})
        await local_cache.put(key, fake_pdf())
        clock.now += 3601
        assert await local_cache.get(key) is None
        assert not (tmp_path / key).exists()

    async def test_put_replaces_older_variants(self, local_cache, tmp_path):
        old = PDFCache.build_key("u1", "d1", "backlog", {"v": 1})
        new = PDFCache.build_key("u1", "d1", "backlog", {"v": 2})
        other = PDFCache.build_key("u1", "d1", "charter", {"v": 1})
        await local_cache.put(old, fake_pdf())
        await local_cache.put(other, fake_pdf())
        await local_cache.put(new, fake_pdf())

        assert not (tmp_path / old).exists()
        assert (tmp_path / new).exists()
        assert (tmp_path / other).exists()

    async def test_metadata_sidecar(self, local_cache, tmp_path):
        key = PDFCache.build_key("u1", "d1", "backlog", {})
        await local_cache.put(key, fake_pdf(), page_count=2)
        artifact = await local_cache.storage.read(key)
        assert artifact.metadata[PAGE_COUNT_KEY] == "2"
        assert float(artifact.metadata[CREATED_AT_KEY]) == 1_000_000.0


class TestStorageFailures:

    def test_base_storage_is_abstract(self):
        with pytest.raises(TypeError):
            ArtifactStorage()

    async def test_read_error_is_a_miss(self):
        cache = PDFCache(BrokenStorage())
        assert await cache.get("u/d/charter_12345678.pdf") is None

    async def test_write_error_reported(self):
        cache = PDFCache(BrokenStorage())
        assert await cache.put("u/d/charter_12345678.pdf", fake_pdf()) is False


class TestS3Storage:

    @pytest.fixture
    def client(self):
        return FakeS3Client()

    @pytest.fixture
    def s3_cache(self, client):
        return PDFCache(S3ArtifactStorage("docs", client=client), clock=Clock())

    async def test_round_trip_with_metadata(self, s3_cache, client):
        key = PDFCache.build_key("u1", "d1", "kanban", {})
        await s3_cache.put(key, fake_pdf(4), page_count=4)
        body, metadata = client.objects[f"pdf-cache/{key}"]
        assert body == fake_pdf(4)
        assert metadata[PAGE_COUNT_KEY] == "4"

        hit = await s3_cache.get(key)
        assert hit.page_count == 4

    async def test_missing_object(self, s3_cache):
        assert await s3_cache.get("u1/d1/kanban_00000000.pdf") is None

    async def test_prefix_delete(self, s3_cache, client):
        first = PDFCache.build_key("u1", "d1", "kanban", {"v": 1})
        second = PDFCache.build_key("u1", "d1", "kanban", {"v": 2})
        await s3_cache.put(first, fake_pdf())
        await s3_cache.put(second, fake_pdf())
        assert list(client.objects) == [f"pdf-cache/{second}"]

    async def test_other_client_errors_are_misses(self, client):
        def denied(Bucket, Key):
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "Denied"}}, "GetObject")

        client.get_object = denied
        cache = PDFCache(S3ArtifactStorage("docs", client=client))
        assert await cache.get("u1/d1/kanban_00000000.pdf") is None


class TestCreateStorage:

    def test_local_without_bucket(self, settings):
        storage = create_storage(settings)
        assert isinstance(storage, LocalArtifactStorage)
        assert storage.root == settings.artifacts_dir
