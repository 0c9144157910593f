import json
from unittest import mock

from django.test import TestCase

from cc_core.models import App, Droplet, Package, Process
from cc_core.presenters import AppPresenter, DropletPresenter, PackagePresenter
from cc_core.tests.fixtures import add_role, make_app, make_space, make_user


class PresenterTests(TestCase):
    def setUp(self):
        self.app = make_app()

    def test_package_payload(self):
        package = Package.objects.create(app=self.app, type="bits", state="READY", package_hash="abc123")
        body = json.loads(PackagePresenter().present_json(package))

        self.assertEqual(body["guid"], package.guid)
        self.assertEqual(body["hash"], "abc123")
        self.assertEqual(body["state"], "READY")
        self.assertIsNone(body["error"])
        self.assertNotIn("url", body)
        self.assertEqual(body["_links"]["self"]["href"], f"/v3/packages/{package.guid}")

    def test_docker_package_payload_has_url(self):
        package = Package.objects.create(app=self.app, type="docker", url="registry/img", state="READY")
        self.assertEqual(PackagePresenter().to_payload(package)["url"], "registry/img")

    def test_droplet_payload_links_package(self):
        package = Package.objects.create(app=self.app, type="bits")
        droplet = Droplet.objects.create(app=self.app, package=package, state="STAGED", droplet_hash="d1")
        body = json.loads(DropletPresenter().present_json(droplet))

        self.assertEqual(body["hash"], "d1")
        self.assertEqual(body["_links"]["package"]["href"], f"/v3/packages/{package.guid}")
        self.assertEqual(body["_links"]["app"]["href"], f"/v3/apps/{self.app.guid}")

    def test_droplet_without_package(self):
        droplet = Droplet.objects.create(app=self.app)
        self.assertNotIn("package", DropletPresenter().to_payload(droplet)["_links"])

    def test_app_payload(self):
        Process.objects.create(app=self.app, type="web", instances=3)
        body = AppPresenter().to_payload(self.app)
        self.assertEqual(body["processes"][0]["type"], "web")
        self.assertEqual(body["processes"][0]["instances"], 3)
        self.assertEqual(body["_links"]["space"]["href"], f"/v2/spaces/{self.app.space.guid}")


@mock.patch("cc_core.jobs.enqueuer._queue")
class AppApiTests(TestCase):
    def setUp(self):
        self.space = make_space()
        self.app = make_app(self.space, name="web")
        Process.objects.create(app=self.app, type="web")
        self.user = make_user("dev")
        add_role(self.space, self.user, "developer")
        self.client.force_login(self.user)

    def test_show(self, queue_factory):
        response = self.client.get(f"/v3/apps/{self.app.guid}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "web")

    def test_invisible_app_is_not_found(self, queue_factory):
        self.client.force_login(make_user("stranger"))
        self.assertEqual(self.client.get(f"/v3/apps/{self.app.guid}").status_code, 404)
        self.assertEqual(self.client.delete(f"/v3/apps/{self.app.guid}").status_code, 404)
        self.assertTrue(App.objects.filter(pk=self.app.pk).exists())

    def test_delete(self, queue_factory):
        Droplet.objects.create(app=self.app, droplet_hash="h")
        response = self.client.delete(f"/v3/apps/{self.app.guid}")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(App.objects.filter(pk=self.app.pk).exists())

    def test_auditor_delete_is_forbidden(self, queue_factory):
        auditor = make_user("auditor")
        add_role(self.space, auditor, "auditor")
        self.client.force_login(auditor)
        self.assertEqual(self.client.delete(f"/v3/apps/{self.app.guid}").status_code, 403)

    def test_droplet_endpoints(self, queue_factory):
        droplet = Droplet.objects.create(app=self.app, state="STAGED", droplet_hash="h")
        self.assertEqual(self.client.get(f"/v3/droplets/{droplet.guid}").json()["guid"], droplet.guid)
        self.assertEqual(self.client.delete(f"/v3/droplets/{droplet.guid}").status_code, 204)
        self.assertEqual(self.client.get(f"/v3/droplets/{droplet.guid}").status_code, 404)
