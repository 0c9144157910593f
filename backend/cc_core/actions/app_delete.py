import logging

from ..access import AccessContext
from ..errors import AppNotFound, Unauthorized
from ..locking import locked_app
from ..models import App
from .droplet_delete import DropletDelete
from .package_delete import PackageDelete

logger = logging.getLogger(__name__)


class AppDelete:
    def __init__(self, access_context: AccessContext):
        self.access_context = access_context

    def delete(self, app_guid: str) -> App:
        app = App.objects.select_related("space__organization").filter(guid=app_guid).first()
        if app is None:
            raise AppNotFound()

        with locked_app(app) as app:
            if self.access_context.cannot("delete", app, app.space):
                logger.warning("delete of app %s denied", app.guid)
                raise Unauthorized()
            DropletDelete(app.droplets.all()).delete()
            PackageDelete(app.packages.all()).delete()
            app.delete()

        logger.info("deleted app %s", app_guid)
        return app
