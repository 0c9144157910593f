"""Keyset-paged listing of syslog drain urls per app.

Pages are ordered by app primary key and the continuation token is the last
key returned. Apps without a non-empty drain url are filtered out in the
query itself, so they never take a slot in a page.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models import App, ServiceBinding


@dataclass
class DrainUrlPage:
    results: "OrderedDict[str, List[str]]"
    next_id: Optional[int]

    def as_payload(self) -> Dict[str, object]:
        return {"results": dict(self.results), "next_id": self.next_id}


def _bindings_with_drains():
    return ServiceBinding.objects.filter(syslog_drain_url__isnull=False).exclude(syslog_drain_url="")


class SyslogDrainUrlsQuery:
    def __init__(self, batch_size: int, next_id: int = 0):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size
        self.next_id = max(int(next_id or 0), 0)

    def fetch(self) -> DrainUrlPage:
        apps = list(
            App.objects.filter(id__gt=self.next_id, id__in=_bindings_with_drains().values("app_id"))
            .order_by("id")
            .values_list("id", "guid")[: self.batch_size]
        )
        if not apps:
            return DrainUrlPage(results=OrderedDict(), next_id=None)

        guid_by_id = dict(apps)
        drains: Dict[int, List[str]] = {app_id: [] for app_id, _ in apps}
        rows = _bindings_with_drains().filter(app_id__in=guid_by_id.keys()).order_by("id").values_list("app_id", "syslog_drain_url")
        for app_id, url in rows:
            drains[app_id].append(url)

        results = OrderedDict((guid_by_id[app_id], drains[app_id]) for app_id, _ in apps)
        return DrainUrlPage(results=results, next_id=apps[-1][0])
