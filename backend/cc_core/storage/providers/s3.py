import os
from typing import Any, Dict

import boto3
from botocore.exceptions import ClientError

from .keys import partitioned_key


class S3Blobstore:
    provider_type = "s3"

    def __init__(self, name: str, config: Dict[str, Any]):
        self.name = name
        self.config = config or {}
        self.bucket = str(self.config.get("bucket") or "").strip()
        self.region = str(self.config.get("region") or os.environ.get("AWS_DEFAULT_REGION") or os.environ.get("AWS_REGION") or "").strip()
        self.prefix = str(self.config.get("prefix") or name).strip().strip("/")
        self.kms_key_id = str(self.config.get("kms_key_id") or "").strip()
        self.client = boto3.client("s3", region_name=self.region) if self.region else boto3.client("s3")

    def _key(self, key: str) -> str:
        return f"{self.prefix}/{partitioned_key(key)}"

    def exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def cp_to_blobstore(self, source_path: str, key: str) -> Dict[str, Any]:
        if not self.bucket:
            raise RuntimeError("s3 bucket is required")
        extra: Dict[str, Any] = {"ContentType": "application/zip"}
        if self.kms_key_id:
            extra["ServerSideEncryption"] = "aws:kms"
            extra["SSEKMSKeyId"] = self.kms_key_id
        with open(source_path, "rb") as handle:
            self.client.put_object(Bucket=self.bucket, Key=self._key(key), Body=handle, **extra)
        return {
            "provider": "s3",
            "bucket": self.bucket,
            "region": self.region,
            "key": self._key(key),
            "size_bytes": os.path.getsize(source_path),
        }

    def delete(self, key: str) -> bool:
        if not self.bucket:
            raise RuntimeError("s3 bucket is required")
        # delete_object succeeds for missing keys.
        self.client.delete_object(Bucket=self.bucket, Key=self._key(key))
        return True

    def download_reference(self, key: str, ttl_seconds: int = 3600) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": self._key(key)},
            ExpiresIn=ttl_seconds,
        )
