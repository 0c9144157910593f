import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import redis
from django.conf import settings
from rq import Queue

from ..errors import JobEnqueueError

logger = logging.getLogger(__name__)

PACKAGE_BLOBSTORE = "package_blobstore"
DROPLET_BLOBSTORE = "droplet_blobstore"


@dataclass(frozen=True)
class BlobstoreDelete:
    key: str
    blobstore_name: str

    func_path = "cc_core.jobs.runtime.blobstore_delete"

    @property
    def args(self) -> Tuple[Any, ...]:
        return (self.key, self.blobstore_name)


@dataclass(frozen=True)
class PackageBits:
    package_guid: str
    local_path: str

    func_path = "cc_core.jobs.runtime.package_bits"

    @property
    def args(self) -> Tuple[Any, ...]:
        return (self.package_guid, self.local_path)


def generic_queue() -> str:
    return settings.CC_GENERIC_QUEUE


def local_queue(config: Optional[Dict[str, Any]] = None) -> str:
    config = config or settings.CC_CONFIG
    return f"cc-{config.get('name') or 'api'}-{int(config.get('index') or 0)}"


def _queue(name: str) -> Queue:
    return Queue(name, connection=redis.Redis.from_url(settings.CC_JOBS_REDIS_URL))


def _perform_inline(job) -> None:
    from . import runtime

    func = getattr(runtime, job.func_path.rsplit(".", 1)[1])
    func(*job.args)


class Enqueuer:
    def __init__(self, job, queue: Optional[str] = None):
        self.job = job
        self.queue_name = queue or generic_queue()

    def enqueue(self) -> Optional[str]:
        if settings.CC_ASYNC_JOBS_MODE == "inprocess":
            logger.info("running %s inline (queue %s)", self.job.func_path, self.queue_name)
            _perform_inline(self.job)
            return None
        try:
            rq_job = _queue(self.queue_name).enqueue(
                self.job.func_path,
                *self.job.args,
                job_timeout=settings.CC_JOB_TIMEOUT,
            )
        except redis.exceptions.RedisError as exc:
            logger.error("enqueue of %s to %s failed: %s", self.job.func_path, self.queue_name, exc)
            raise JobEnqueueError(self.queue_name, str(exc)) from exc
        logger.info("enqueued %s %s on %s", self.job.func_path, rq_job.id, self.queue_name)
        return rq_job.id
