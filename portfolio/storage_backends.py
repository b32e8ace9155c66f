"""Asset store for uploaded images and documents.

Content records never hold file bytes: a file field stores the object path and
the model mirrors its public URL into a ``*_url`` column (see
``portfolio.models.AssetUrlMixin``). Replacing or clearing a file leaves the
previous object in the bucket.
"""

import io
import logging
import mimetypes
from typing import List, Tuple

from django.conf import settings
from django.core.files.base import File
from django.core.files.storage import Storage, default_storage
from django.utils import timezone
from django.utils.deconstruct import deconstructible
from supabase import create_client

logger = logging.getLogger(__name__)

_supabase_client = None


def supabase_configured() -> bool:
    return bool(getattr(settings, "SUPABASE_PROJECT_URL", "") or getattr(settings, "SUPABASE_URL", ""))


def _get_client():
    global _supabase_client  # noqa: PLW0603
    if _supabase_client is None:
        url = getattr(settings, "SUPABASE_PROJECT_URL", "") or getattr(settings, "SUPABASE_URL", "")
        key = (
            getattr(settings, "SUPABASE_SERVICE_ROLE_KEY", None)
            or getattr(settings, "SUPABASE_ANON_KEY", "")
        )
        if not url or not key:
            raise RuntimeError("SUPABASE_PROJECT_URL and a service/anon key must be set")
        _supabase_client = create_client(url, key)
    return _supabase_client


@deconstructible
class SupabaseMediaStorage(Storage):
    """Django Storage backend for a public Supabase Storage bucket."""

    def __init__(self, bucket=None) -> None:
        self.bucket: str = bucket or getattr(settings, "SUPABASE_BUCKET", "media")
        if not self.bucket:
            raise RuntimeError("SUPABASE_BUCKET must be set")
        base = getattr(settings, "SUPABASE_PROJECT_URL", "") or getattr(settings, "SUPABASE_URL", "")
        if not base:
            raise RuntimeError("SUPABASE_PROJECT_URL (or SUPABASE_URL) must be set to project API URL")
        self.public_base = f"{base.rstrip('/')}/storage/v1/object/public/{self.bucket}"

    def _full_path(self, name: str) -> str:
        return name.lstrip("/")

    def _bucket(self):
        return _get_client().storage.from_(self.bucket)

    def _open(self, name: str, mode: str = "rb") -> File:
        resp = self._bucket().download(self._full_path(name))
        data = getattr(resp, "content", None) or resp
        return File(io.BytesIO(data), name=name)

    def _save(self, name: str, content: File) -> str:
        path = self._full_path(name)
        if hasattr(content, "seek"):
            content.seek(0)
        data = content.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        ctype = (
            getattr(content, "content_type", None)
            or mimetypes.guess_type(path)[0]
            or "application/octet-stream"
        )
        self._bucket().upload(path, data, {"content-type": ctype, "upsert": "true"})
        logger.info("Uploaded asset %s (%s, %d bytes)", path, ctype, len(data))
        return name

    def exists(self, name: str) -> bool:
        path = self._full_path(name)
        prefix, _, target = path.rpartition("/")
        items = self._bucket().list(prefix or None)
        return any(_item_name(it) == target for it in items)

    def url(self, name: str) -> str:
        return f"{self.public_base}/{self._full_path(name)}"

    def delete(self, name: str) -> None:
        self._bucket().remove([self._full_path(name)])

    def size(self, name: str) -> int:
        return 0

    def path(self, name: str) -> str:
        raise NotImplementedError("Supabase storage has no local path")

    def listdir(self, path: str) -> Tuple[List[str], List[str]]:
        # Supabase lists objects only; folders are not distinguishable
        items = self._bucket().list(path or None)
        return [], [_item_name(it) for it in items]

    def get_modified_time(self, name: str):
        return timezone.now()

    def get_created_time(self, name: str):
        return timezone.now()

    def get_accessed_time(self, name: str):
        return timezone.now()


def _item_name(item) -> str:
    if isinstance(item, dict):
        return item.get("name", "")
    return getattr(item, "name", "")


def select_media_storage():
    """Storage for every content file field: Supabase when configured, else the default."""
    if supabase_configured():
        return SupabaseMediaStorage()
    return default_storage
