from contextlib import contextmanager
from typing import Iterator

from django.db import transaction

from .errors import AppNotFound
from .models import App


@contextmanager
def locked_app(app: App) -> Iterator[App]:
    """Open a transaction holding a row lock on ``app``.

    The app is re-read ``FOR UPDATE`` inside the transaction so callers never
    authorize against a row deleted after their unlocked lookup. Any exception
    raised in the block rolls back and releases the lock.
    """
    with transaction.atomic():
        locked = App.objects.select_for_update().select_related("space__organization").filter(pk=app.pk).first()
        if locked is None:
            raise AppNotFound()
        yield locked
