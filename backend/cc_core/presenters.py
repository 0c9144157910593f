import json
from typing import Any, Dict, Optional

from django.core.serializers.json import DjangoJSONEncoder

from .models import App, Droplet, Package


def _href(path: str) -> Dict[str, str]:
    return {"href": path}


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value else None


class PackagePresenter:
    def present_json(self, package: Package) -> str:
        return json.dumps(self.to_payload(package), cls=DjangoJSONEncoder)

    def to_payload(self, package: Package) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "guid": package.guid,
            "type": package.type,
            "hash": package.package_hash,
            "state": package.state,
            "error": package.error,
            "created_at": _timestamp(package.created_at),
            "_links": {
                "self": _href(f"/v3/packages/{package.guid}"),
                "app": _href(f"/v3/apps/{package.app_id}"),
            },
        }
        if package.url is not None:
            payload["url"] = package.url
        return payload


class DropletPresenter:
    def present_json(self, droplet: Droplet) -> str:
        return json.dumps(self.to_payload(droplet), cls=DjangoJSONEncoder)

    def to_payload(self, droplet: Droplet) -> Dict[str, Any]:
        links = {
            "self": _href(f"/v3/droplets/{droplet.guid}"),
            "app": _href(f"/v3/apps/{droplet.app_id}"),
        }
        if droplet.package_id:
            links["package"] = _href(f"/v3/packages/{droplet.package_id}")
        return {
            "guid": droplet.guid,
            "state": droplet.state,
            "hash": droplet.droplet_hash,
            "error": droplet.error,
            "created_at": _timestamp(droplet.created_at),
            "_links": links,
        }


class AppPresenter:
    def to_payload(self, app: App) -> Dict[str, Any]:
        return {
            "guid": app.guid,
            "name": app.name,
            "created_at": _timestamp(app.created_at),
            "processes": [
                {"guid": process.guid, "type": process.type, "instances": process.instances}
                for process in app.processes.all()
            ],
            "_links": {
                "self": _href(f"/v3/apps/{app.guid}"),
                "space": _href(f"/v2/spaces/{app.space.guid}"),
                "packages": _href(f"/v3/apps/{app.guid}/packages"),
            },
        }
