import shutil
from pathlib import Path
from typing import Any, Dict

from .keys import partitioned_key


class LocalBlobstore:
    provider_type = "local"

    def __init__(self, name: str, config: Dict[str, Any]):
        self.name = name
        self.config = config or {}
        self.base_path = Path(str(self.config.get("base_path") or f"/tmp/cc-blobstore/{name}"))

    def _path(self, key: str) -> Path:
        return self.base_path / partitioned_key(key)

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def cp_to_blobstore(self, source_path: str, key: str) -> Dict[str, Any]:
        target = self._path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, target)
        return {
            "provider": "local",
            "key": key,
            "path": str(target),
            "size_bytes": target.stat().st_size,
        }

    def delete(self, key: str) -> bool:
        target = self._path(key)
        if not target.exists():
            return False
        target.unlink()
        return True

    def download_reference(self, key: str, ttl_seconds: int = 3600) -> str:
        return str(self._path(key))
