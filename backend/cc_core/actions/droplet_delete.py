import logging

from django.db.models import QuerySet

from ..jobs import DROPLET_BLOBSTORE, BlobstoreDelete, Enqueuer, generic_queue
from ..models import Droplet

logger = logging.getLogger(__name__)


class DropletDelete:
    """Delete every droplet in ``droplet_dataset`` along with its blob.

    One blob-delete job is enqueued per row before any row is destroyed, so a
    failure part way leaves nothing unreferenced in the blobstore. Enqueue
    errors are not caught; running the delete again is safe.
    """

    def __init__(self, droplet_dataset: QuerySet):
        self.droplet_dataset = droplet_dataset

    def delete(self) -> int:
        enqueued = 0
        for guid, droplet_hash in self.droplet_dataset.values_list("guid", "droplet_hash").iterator():
            blobstore_delete = BlobstoreDelete(Droplet.key_for(guid, droplet_hash), DROPLET_BLOBSTORE)
            Enqueuer(blobstore_delete, queue=generic_queue()).enqueue()
            enqueued += 1
        deleted, _ = self.droplet_dataset.delete()
        logger.info("deleted %s droplets, %s blob deletes enqueued", deleted, enqueued)
        return deleted
