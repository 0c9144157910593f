from .enqueuer import (
    DROPLET_BLOBSTORE,
    PACKAGE_BLOBSTORE,
    BlobstoreDelete,
    Enqueuer,
    PackageBits,
    generic_queue,
    local_queue,
)

__all__ = [
    "DROPLET_BLOBSTORE",
    "PACKAGE_BLOBSTORE",
    "BlobstoreDelete",
    "Enqueuer",
    "PackageBits",
    "generic_queue",
    "local_queue",
]
