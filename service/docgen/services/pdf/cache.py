"""
Content-addressed PDF cache.

Keys look like ``{user}/{document}/{type}_{hash8}.pdf``; the hash covers the
content and every option that changes the output. Writing a new render for
the same user, document and type removes older variants first. The cache
never fails a render: storage problems are logged and treated as a miss.
"""
import hashlib
import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from docgen.schemas.pdf import PDFOptions
from docgen.services.pdf.storage import CREATED_AT_KEY, ArtifactStorage

logger = logging.getLogger(__name__)

PAGE_COUNT_KEY = "page-count"
_UNSAFE_SEGMENT_RE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class CachedPDF:
    key: str
    data: bytes
    page_count: int
    created_at: float


def _segment(value: Optional[str], default: str) -> str:
    cleaned = _UNSAFE_SEGMENT_RE.sub("-", str(value or "")).strip(".-")
    return cleaned or default


def content_hash(content: Any, options: Optional[PDFOptions] = None, context: Optional[Dict[str, Any]] = None) -> str:
    payload = {
        "content": content,
        "options": options.cache_fields() if options else {},
        "context": context or {},
    }
    encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def key_prefix(key: str) -> str:
    """``user/doc/type_`` part shared by every variant of one logical document."""
    return key.rsplit("_", 1)[0] + "_"


class PDFCache:
    def __init__(self, storage: ArtifactStorage, ttl_seconds: int = 86400, clock: Callable[[], float] = time.time):
        self.storage = storage
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    @staticmethod
    def build_key(
        user_id: Optional[str],
        document_id: Optional[str],
        document_type: str,
        content: Any,
        options: Optional[PDFOptions] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Deterministic key; identical inputs always map to the same entry."""
        digest = content_hash(content, options, context)[:8]
        return f"{_segment(user_id, 'anonymous')}/{_segment(document_id, 'adhoc')}/{_segment(document_type, 'document')}_{digest}.pdf"

    async def get(self, key: str) -> Optional[CachedPDF]:
        try:
            artifact = await self.storage.read(key)
        except Exception as e:
            logger.warning(f"[pdf_cache] Read failed for {key}: {e}")
            return None
        if artifact is None:
            return None

        age = self._clock() - artifact.created_at
        if age > self.ttl_seconds:
            logger.info(f"[pdf_cache] Expired entry {key} ({int(age)}s old)")
            try:
                await self.storage.delete(key)
            except Exception as e:
                logger.warning(f"[pdf_cache] Failed to delete expired entry {key}: {e}")
            return None

        try:
            page_count = int(artifact.metadata.get(PAGE_COUNT_KEY, 1))
        except (TypeError, ValueError):
            page_count = 1
        logger.info(f"[pdf_cache] Hit {key}")
        return CachedPDF(key=key, data=artifact.data, page_count=max(1, page_count), created_at=artifact.created_at)

    async def put(self, key: str, data: bytes, page_count: int = 1) -> bool:
        """Replace every variant of the logical document with this render."""
        try:
            removed = await self.storage.delete_prefix(key_prefix(key))
            if removed:
                logger.info(f"[pdf_cache] Removed {removed} stale entr{'y' if removed == 1 else 'ies'} for {key_prefix(key)}")
            await self.storage.write(
                key,
                data,
                {PAGE_COUNT_KEY: str(page_count), CREATED_AT_KEY: str(self._clock())},
            )
        except Exception as e:
            logger.warning(f"[pdf_cache] Write failed for {key}: {e}")
            return False
        return True
