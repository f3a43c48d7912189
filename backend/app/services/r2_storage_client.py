"""
R2StorageClient - Cloudflare R2 (S3-compatible) client for certificate files.

Signs requests with SigV4 query-string authentication (UNSIGNED-PAYLOAD) and
talks to R2 with ``requests``; no boto3 dependency.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
import hmac
import logging
from typing import Dict, Optional
from urllib.parse import quote

import requests

from ..core.config import settings

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "AWS4-HMAC-SHA256"


class StorageUploadError(Exception):
    """Raised when the blob store rejects or fails an upload."""


@dataclass
class PresignedUrl:
    url: str
    headers: Dict[str, str]
    expires_at: str


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def _signing_key(secret_key: str, datestamp: str, region: str, service: str) -> bytes:
    k_date = _hmac(("AWS4" + secret_key).encode("utf-8"), datestamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, "aws4_request")


def _canonical_query(params: Dict[str, str]) -> str:
    return "&".join(
        f"{quote(k, safe='-_.~')}={quote(str(params[k]), safe='-_.~')}" for k in sorted(params)
    )


class R2StorageClient:
    """Uploads, signs and removes certificate objects in one R2 bucket."""

    region = "auto"
    service = "s3"

    def __init__(self, http: Optional[requests.Session] = None) -> None:
        if (
            not settings.r2_account_id
            or not settings.r2_access_key_id
            or not settings.r2_secret_access_key.get_secret_value()
        ):
            raise RuntimeError("R2 configuration is missing; check r2_* settings")

        self.access_key_id = settings.r2_access_key_id
        self.secret_key = settings.r2_secret_access_key.get_secret_value()
        self.bucket_name = settings.r2_bucket_name
        self.host = f"{settings.r2_account_id}.r2.cloudflarestorage.com"
        self.http = http or requests.Session()

    def presign(
        self,
        method: str,
        object_key: str,
        expires_seconds: int = 300,
        content_type: Optional[str] = None,
    ) -> PresignedUrl:
        now = datetime.now(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        datestamp = now.strftime("%Y%m%d")
        credential_scope = f"{datestamp}/{self.region}/{self.service}/aws4_request"
        canonical_uri = f"/{self.bucket_name}/{quote(object_key, safe='/-_.~')}"

        params: Dict[str, str] = {
            "X-Amz-Algorithm": SIGNING_ALGORITHM,
            "X-Amz-Credential": f"{self.access_key_id}/{credential_scope}",
            "X-Amz-Date": amz_date,
            "X-Amz-Expires": str(expires_seconds),
            "X-Amz-SignedHeaders": "host",
            "X-Amz-Content-Sha256": "UNSIGNED-PAYLOAD",
        }
        if content_type:
            params["content-type"] = content_type

        query = _canonical_query(params)
        canonical_request = "\n".join(
            [method.upper(), canonical_uri, query, f"host:{self.host}\n", "host", "UNSIGNED-PAYLOAD"]
        )
        string_to_sign = "\n".join(
            [
                SIGNING_ALGORITHM,
                amz_date,
                credential_scope,
                hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
            ]
        )
        key = _signing_key(self.secret_key, datestamp, self.region, self.service)
        signature = hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        return PresignedUrl(
            url=f"https://{self.host}{canonical_uri}?{query}&X-Amz-Signature={signature}",
            headers={"Content-Type": content_type} if content_type else {},
            expires_at=now.replace(microsecond=0).isoformat(),
        )

    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``object_key``; returns the key."""
        pre = self.presign("PUT", object_key, content_type=content_type)
        try:
            resp = self.http.put(pre.url, data=data, headers=pre.headers, timeout=30)
        except requests.RequestException as e:
            logger.error(f"Failed to upload {object_key}: {e}")
            raise StorageUploadError(str(e)) from e
        if not 200 <= resp.status_code < 300:
            logger.error(f"Failed to upload {object_key}: status={resp.status_code}")
            raise StorageUploadError(f"Upload rejected with status {resp.status_code}")
        return object_key

    def document_url(self, object_key: str, expires_seconds: int = 3600) -> str:
        public = settings.public_document_url(object_key)
        if public:
            return public
        return self.presign("GET", object_key, expires_seconds).url

    def delete_object(self, object_key: str) -> bool:
        try:
            resp = self.http.delete(self.presign("DELETE", object_key).url, timeout=30)
            return 200 <= resp.status_code < 300 or resp.status_code == 404
        except requests.RequestException as e:
            logger.error(f"Failed to delete {object_key}: {e}")
            return False
