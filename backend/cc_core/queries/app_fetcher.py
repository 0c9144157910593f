from typing import Optional

from django.db.models import QuerySet

from ..access import AccessContext
from ..models import App


class AppFetcher:
    def __init__(self, access_context: AccessContext):
        self.access_context = access_context

    def fetch(self, app_guid: str) -> Optional[App]:
        return self.dataset().filter(guid=app_guid).first()

    def dataset(self) -> QuerySet:
        ds = App.objects.select_related("space__organization").prefetch_related("processes")
        if self.access_context.has_global_read:
            return ds
        return ds.filter(
            space__in=self.access_context.spaces(),
            space__organization__status="active",
        )
