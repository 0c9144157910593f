from typing import Any, Dict, Optional

from django.conf import settings

from .providers.local import LocalBlobstore
from .providers.s3 import S3Blobstore


class BlobstoreRegistry:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config if config is not None else (settings.CC_BLOBSTORES or {})
        self._providers_by_name = {}
        for name, provider in self.config.items():
            if not isinstance(provider, dict):
                continue
            ptype = str(provider.get("type") or "").strip().lower()
            if ptype == "s3":
                self._providers_by_name[name] = S3Blobstore(name, provider.get("s3") or {})
            elif ptype == "local":
                self._providers_by_name[name] = LocalBlobstore(name, provider.get("local") or {})

    def get(self, name: str):
        provider = self._providers_by_name.get(name)
        if provider:
            return provider
        return LocalBlobstore(name, {})
