import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError

from ..access import AccessContext
from ..errors import AppNotFound, InvalidPackage, InvalidPackageType, PackageNotFound, Unauthorized, ValidationFailed
from ..jobs import PACKAGE_BLOBSTORE, BlobstoreDelete, Enqueuer, PackageBits, generic_queue, local_queue
from ..locking import locked_app
from ..messages import PackageCreateMessage, PackageUploadMessage, accepts_uploads, initial_state, spec_for
from ..models import App, Package

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return ", ".join(f"{field} {' '.join(msgs)}" for field, msgs in sorted(exc.message_dict.items()))
    return " ".join(exc.messages)


class PackagesHandler:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config

    def create(self, message: PackageCreateMessage, access_context: AccessContext) -> Package:
        spec = message.package_spec()
        package = Package(
            type=message.type,
            url=message.url,
            state=initial_state(spec),
        )

        app = App.objects.select_related("space__organization").filter(guid=message.app_guid).first()
        if app is None:
            raise AppNotFound()

        try:
            with locked_app(app) as app:
                package.app = app
                if access_context.cannot("create", package, app, app.space):
                    logger.warning("create package denied on app %s", app.guid)
                    raise Unauthorized()
                package.save()
        except ValidationError as exc:
            raise InvalidPackage(_validation_message(exc)) from exc

        logger.info("created %s package %s for app %s (%s)", package.type, package.guid, app.guid, package.state)
        return package

    def upload(self, message: PackageUploadMessage, access_context: AccessContext) -> Package:
        result = message.validate()
        if not result.ok:
            raise ValidationFailed(result.errors)

        package = Package.objects.filter(guid=message.package_guid).first()
        if package is None:
            raise PackageNotFound()

        app = App.objects.select_related("space__organization").filter(guid=package.app_id).first()
        if app is None:
            raise AppNotFound()

        if not accepts_uploads(spec_for(package)):
            raise InvalidPackageType("Package type must be bits.")

        # Checked without the app lock; create and delete take it.
        space = app.space
        if access_context.cannot("create", package, app, space):
            logger.warning("upload to package %s denied", package.guid)
            raise Unauthorized()

        package.state = Package.PENDING_STATE
        package.save(update_fields=["state", "updated_at"])

        bits_upload_job = PackageBits(package.guid, message.package_path)
        Enqueuer(bits_upload_job, queue=local_queue(self.config)).enqueue()

        logger.info("package %s pending bits ingest", package.guid)
        return package

    def delete(self, guid: str, access_context: AccessContext) -> Optional[Package]:
        package = Package.objects.filter(guid=guid).first()
        if package is None:
            return None

        app = App.objects.select_related("space__organization").filter(guid=package.app_id).first()
        if app is None:
            raise AppNotFound()

        with locked_app(app) as app:
            if access_context.cannot("delete", package, app, app.space):
                logger.warning("delete of package %s denied", package.guid)
                raise Unauthorized()
            package.delete()

        # Row is gone; blob cleanup is best effort from here.
        blobstore_delete = BlobstoreDelete(guid, PACKAGE_BLOBSTORE)
        Enqueuer(blobstore_delete, queue=generic_queue()).enqueue()

        logger.info("deleted package %s", guid)
        return package

    def show(self, guid: str, access_context: AccessContext) -> Optional[Package]:
        package = Package.objects.select_related("app__space__organization").filter(guid=guid).first()
        if package is None:
            return None
        if access_context.cannot("read", package):
            raise Unauthorized()
        return package
