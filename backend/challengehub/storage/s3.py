from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from challengehub.core.constants import (
    PROOF_URL_EXPIRES_SECONDS,
    S3_ACCESS_KEY_ID,
    S3_BUCKET_NAME,
    S3_ENDPOINT,
    S3_REGION,
    S3_SECRET_ACCESS_KEY,
)
from challengehub.core.logger import logger


class EvidenceStoreError(Exception):
    """Raised when the object store cannot sign or delete a proof file."""
    pass


class EvidenceStore:
    """
    Thin client over the S3-compatible bucket holding proof files.

    The engine never moves bytes through here: it only asks for a time-limited
    download URL once access has been granted, or removes a file whose proof
    row is being deleted.
    """

    def __init__(self, bucket_name: str = S3_BUCKET_NAME, client=None):
        """
        :param bucket_name: Bucket used when the proof URL does not name one.
        :param client: Pre-built boto3 S3 client; built from settings when omitted.
        """
        self.bucket_name = bucket_name
        self.client = client or boto3.client(
            "s3",
            endpoint_url=S3_ENDPOINT,
            region_name=S3_REGION,
            aws_access_key_id=S3_ACCESS_KEY_ID,
            aws_secret_access_key=S3_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
        )

    @staticmethod
    def extract_key_from_url(url: str) -> Optional[str]:
        """
        Object key of a stored proof URL shaped ``https://endpoint/<bucket>/<key...>``.

        :return: The key, or None when the URL has no key part.
        """
        path = urlparse(url or "").path
        parts = [p for p in path.split("/") if p]
        if len(parts) < 2:
            logger.warning("storage.invalid_url", url=url)
            return None
        return "/".join(parts[1:])

    @staticmethod
    def extract_bucket_from_url(url: str) -> Optional[str]:
        path = urlparse(url or "").path
        parts = [p for p in path.split("/") if p]
        return parts[0] if parts else None

    def get_signed_url(self, key: str, expires_in: int = PROOF_URL_EXPIRES_SECONDS, bucket_name: Optional[str] = None) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket_name or self.bucket_name, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise EvidenceStoreError(f"Could not sign URL for {key}: {e}") from e

    def delete_file(self, key: str, bucket_name: Optional[str] = None) -> None:
        try:
            self.client.delete_object(Bucket=bucket_name or self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise EvidenceStoreError(f"Could not delete {key}: {e}") from e


_store: Optional[EvidenceStore] = None


def get_evidence_store() -> EvidenceStore:
    """FastAPI dependency; the client is built on first use."""
    global _store
    if _store is None:
        _store = EvidenceStore()
    return _store
