import os

import django
import redis
from rq import Worker


def main() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cloudcontroller.settings")
    django.setup()

    from django.conf import settings

    from cc_core.jobs import generic_queue, local_queue

    conn = redis.Redis.from_url(settings.CC_JOBS_REDIS_URL)
    worker = Worker([local_queue(), generic_queue()], connection=conn)
    worker.work()


if __name__ == "__main__":
    main()
