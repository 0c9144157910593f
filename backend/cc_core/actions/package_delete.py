import logging

from django.db.models import QuerySet

from ..jobs import PACKAGE_BLOBSTORE, BlobstoreDelete, Enqueuer, generic_queue

logger = logging.getLogger(__name__)


class PackageDelete:
    def __init__(self, package_dataset: QuerySet):
        self.package_dataset = package_dataset

    def delete(self) -> int:
        for guid in self.package_dataset.values_list("guid", flat=True).iterator():
            Enqueuer(BlobstoreDelete(guid, PACKAGE_BLOBSTORE), queue=generic_queue()).enqueue()
        deleted, _ = self.package_dataset.delete()
        logger.info("deleted %s packages", deleted)
        return deleted
