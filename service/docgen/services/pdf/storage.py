"""Artifact storage for cached PDFs.

S3 when a bucket is configured (production/cloud deployments), otherwise a
local directory under ``artifacts_path`` (self-hosted deployments). Both
backends are blocking and are wrapped with ``asyncio.to_thread``.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import boto3
from botocore.exceptions import ClientError

from docgen.core.config import Settings

logger = logging.getLogger(__name__)

CREATED_AT_KEY = "created-at"


@dataclass
class StoredArtifact:
    key: str
    data: bytes
    created_at: float
    metadata: Dict[str, str] = field(default_factory=dict)


class ArtifactStorage(ABC):
    """Async facade; subclasses implement the blocking ``_read/_write/_delete/_delete_prefix``."""

    uri_scheme = ""

    async def read(self, key: str) -> Optional[StoredArtifact]:
        return await asyncio.to_thread(self._read, key)

    async def write(self, key: str, data: bytes, metadata: Optional[Dict[str, str]] = None) -> str:
        return await asyncio.to_thread(self._write, key, data, dict(metadata or {}))

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)

    async def delete_prefix(self, prefix: str) -> int:
        return await asyncio.to_thread(self._delete_prefix, prefix)

    @abstractmethod
    def _read(self, key: str) -> Optional[StoredArtifact]:
        ...

    @abstractmethod
    def _write(self, key: str, data: bytes, metadata: Dict[str, str]) -> str:
        ...

    @abstractmethod
    def _delete(self, key: str) -> bool:
        ...

    @abstractmethod
    def _delete_prefix(self, prefix: str) -> int:
        ...


class LocalArtifactStorage(ArtifactStorage):
    """Files under a root directory, with a ``.meta.json`` sidecar per artifact."""

    uri_scheme = "file"

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / key

    @staticmethod
    def _meta_path(path: Path) -> Path:
        return path.with_name(path.name + ".meta.json")

    def _read(self, key: str) -> Optional[StoredArtifact]:
        path = self._path(key)
        if not path.exists():
            return None
        meta_path = self._meta_path(path)
        metadata: Dict[str, str] = {}
        if meta_path.exists():
            metadata = json.loads(meta_path.read_text())
        created_at = float(metadata.get(CREATED_AT_KEY) or path.stat().st_mtime)
        return StoredArtifact(key=key, data=path.read_bytes(), created_at=created_at, metadata=metadata)

    def _write(self, key: str, data: bytes, metadata: Dict[str, str]) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        metadata.setdefault(CREATED_AT_KEY, str(time.time()))
        path.write_bytes(data)
        self._meta_path(path).write_text(json.dumps(metadata))
        logger.info(f"[artifacts] Saved PDF to local storage: {path}")
        return f"file://{path}"

    def _delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        meta_path = self._meta_path(path)
        if meta_path.exists():
            meta_path.unlink()
        logger.info(f"[artifacts] Deleted local file: {path}")
        return True

    def _delete_prefix(self, prefix: str) -> int:
        deleted = 0
        for path in list(self.root.glob(f"{prefix}*")):
            if path.name.endswith(".meta.json") or not path.is_file():
                continue
            if self._delete(str(path.relative_to(self.root))):
                deleted += 1
        return deleted


class S3ArtifactStorage(ArtifactStorage):
    uri_scheme = "s3"

    def __init__(self, bucket: str, prefix: str = "pdf-cache/", client=None, region: str | None = None):
        self.bucket = bucket
        self.prefix = prefix
        self.client = client or boto3.client("s3", region_name=region)

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ArtifactStorage":
        client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        return cls(settings.pdf_bucket, client=client)

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _read(self, key: str) -> Optional[StoredArtifact]:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._object_key(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise
        metadata = dict(response.get("Metadata") or {})
        created_at = metadata.get(CREATED_AT_KEY)
        if created_at is None and response.get("LastModified") is not None:
            created_at = response["LastModified"].timestamp()
        return StoredArtifact(
            key=key,
            data=response["Body"].read(),
            created_at=float(created_at or 0),
            metadata=metadata,
        )

    def _write(self, key: str, data: bytes, metadata: Dict[str, str]) -> str:
        metadata.setdefault(CREATED_AT_KEY, str(time.time()))
        object_key = self._object_key(key)
        self.client.put_object(
            Bucket=self.bucket,
            Key=object_key,
            Body=data,
            ContentType="application/pdf",
            Metadata={name: str(value) for name, value in metadata.items()},
        )
        logger.info(f"[artifacts] Uploaded PDF to s3://{self.bucket}/{object_key}")
        return f"s3://{self.bucket}/{object_key}"

    def _delete(self, key: str) -> bool:
        self.client.delete_object(Bucket=self.bucket, Key=self._object_key(key))
        return True

    def _delete_prefix(self, prefix: str) -> int:
        response = self.client.list_objects_v2(Bucket=self.bucket, Prefix=self._object_key(prefix))
        objects = [{"Key": item["Key"]} for item in response.get("Contents", [])]
        if not objects:
            return 0
        self.client.delete_objects(Bucket=self.bucket, Delete={"Objects": objects})
        return len(objects)


def create_storage(settings: Settings) -> ArtifactStorage:
    if settings.pdf_bucket:
        logger.info(f"[artifacts] Using S3 storage (bucket={settings.pdf_bucket})")
        return S3ArtifactStorage.from_settings(settings)
    logger.info(f"[artifacts] S3 not configured, using local storage: {settings.artifacts_dir}")
    return LocalArtifactStorage(settings.artifacts_dir)
