from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from .r2_storage_client import StorageUploadError


class MemoryStorageClient:
    """Process-local blob store used in development and tests."""

    def __init__(self) -> None:
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.fail_uploads = False

    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> str:
        if self.fail_uploads:
            raise StorageUploadError("memory storage configured to fail")
        self.objects[object_key] = (data, content_type)
        return object_key

    def document_url(self, object_key: str, expires_seconds: int = 3600) -> str:
        stamp = int(datetime.now(timezone.utc).timestamp()) + expires_seconds
        return f"memory://{object_key}?expires={stamp}"

    def delete_object(self, object_key: str) -> bool:
        self.objects.pop(object_key, None)
        return True

    def get(self, object_key: str) -> Optional[bytes]:
        stored = self.objects.get(object_key)
        return stored[0] if stored else None
