"""Job bodies executed by the rq worker.

Both jobs are idempotent: a blob already gone is not an error, and a package
that disappeared before ingestion is skipped.
"""

import hashlib
import logging
import os

from ..models import Package
from ..storage.registry import BlobstoreRegistry
from .enqueuer import PACKAGE_BLOBSTORE

logger = logging.getLogger(__name__)


def _sha1_file(path: str) -> str:
    digest = hashlib.sha1()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(64 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def blobstore_delete(key: str, blobstore_name: str) -> bool:
    blobstore = BlobstoreRegistry().get(blobstore_name)
    deleted = blobstore.delete(key)
    logger.info("blobstore %s delete %s (existed=%s)", blobstore_name, key, deleted)
    return deleted


def package_bits(package_guid: str, local_path: str) -> None:
    try:
        package = Package.objects.filter(guid=package_guid).first()
        if package is None:
            logger.warning("package %s vanished before bits ingest", package_guid)
            return
        try:
            digest = _sha1_file(local_path)
            BlobstoreRegistry().get(PACKAGE_BLOBSTORE).cp_to_blobstore(local_path, package_guid)
        except Exception as exc:
            package.state = Package.FAILED_STATE
            package.error = str(exc) or exc.__class__.__name__
            package.save(update_fields=["state", "error", "updated_at"])
            logger.error("package %s bits ingest failed: %s", package_guid, exc)
            raise
        package.package_hash = digest
        package.state = Package.READY_STATE
        package.error = None
        package.save(update_fields=["package_hash", "state", "error", "updated_at"])
        logger.info("package %s ready (%s)", package_guid, digest)
    finally:
        if local_path and os.path.exists(local_path):
            os.remove(local_path)
