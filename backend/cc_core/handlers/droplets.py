import logging
from typing import Optional

from ..access import AccessContext
from ..actions.droplet_delete import DropletDelete
from ..errors import AppNotFound, Unauthorized
from ..locking import locked_app
from ..models import App, Droplet

logger = logging.getLogger(__name__)


class DropletsHandler:
    def show(self, guid: str, access_context: AccessContext) -> Optional[Droplet]:
        droplet = Droplet.objects.select_related("app__space__organization").filter(guid=guid).first()
        if droplet is None:
            return None
        if access_context.cannot("read", droplet):
            raise Unauthorized()
        return droplet

    def delete(self, guid: str, access_context: AccessContext) -> Optional[Droplet]:
        droplet = Droplet.objects.filter(guid=guid).first()
        if droplet is None:
            return None

        app = App.objects.select_related("space__organization").filter(guid=droplet.app_id).first()
        if app is None:
            raise AppNotFound()

        with locked_app(app) as app:
            if access_context.cannot("delete", droplet, app, app.space):
                logger.warning("delete of droplet %s denied", droplet.guid)
                raise Unauthorized()
            DropletDelete(Droplet.objects.filter(pk=droplet.pk)).delete()

        return droplet
