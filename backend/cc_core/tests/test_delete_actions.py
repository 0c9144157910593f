from unittest import mock

import redis
from django.test import TestCase

from cc_core.actions.app_delete import AppDelete
from cc_core.actions.droplet_delete import DropletDelete
from cc_core.actions.package_delete import PackageDelete
from cc_core.errors import AppNotFound, JobEnqueueError, Unauthorized
from cc_core.handlers.droplets import DropletsHandler
from cc_core.models import App, Droplet, Package, Process
from cc_core.tests.fixtures import (
    add_role,
    context_for,
    enqueued_jobs,
    make_app,
    make_space,
    make_user,
    suspending_lock,
)


@mock.patch("cc_core.jobs.enqueuer._queue")
class DropletDeleteTests(TestCase):
    def setUp(self):
        self.app = make_app()

    def test_one_blob_job_per_droplet_and_no_rows_left(self, queue_factory):
        droplets = [
            Droplet.objects.create(app=self.app, state="STAGED", droplet_hash=f"hash{i}")
            for i in range(3)
        ]

        deleted = DropletDelete(Droplet.objects.filter(app=self.app)).delete()

        self.assertEqual(deleted, 3)
        self.assertEqual(Droplet.objects.filter(app=self.app).count(), 0)
        jobs = enqueued_jobs(queue_factory)
        self.assertEqual(len(jobs), 3)
        self.assertEqual(
            sorted(args for _, _, args in jobs),
            sorted((f"{d.guid}/{d.droplet_hash}", "droplet_blobstore") for d in droplets),
        )
        self.assertTrue(all(queue == "cc-generic" for queue, _, _ in jobs))
        self.assertTrue(all(func == "cc_core.jobs.runtime.blobstore_delete" for _, func, _ in jobs))

    def test_unstaged_droplet_uses_bare_guid_key(self, queue_factory):
        droplet = Droplet.objects.create(app=self.app)
        DropletDelete(Droplet.objects.filter(pk=droplet.pk)).delete()
        self.assertEqual(enqueued_jobs(queue_factory)[0][2], (droplet.guid, "droplet_blobstore"))

    def test_empty_dataset_enqueues_nothing(self, queue_factory):
        self.assertEqual(DropletDelete(Droplet.objects.none()).delete(), 0)
        self.assertFalse(queue_factory.called)

    def test_enqueue_failure_leaves_rows(self, queue_factory):
        Droplet.objects.create(app=self.app, droplet_hash="h")
        queue_factory.return_value.enqueue.side_effect = redis.exceptions.ConnectionError("down")

        with self.assertRaises(JobEnqueueError):
            DropletDelete(Droplet.objects.filter(app=self.app)).delete()
        self.assertEqual(Droplet.objects.filter(app=self.app).count(), 1)


@mock.patch("cc_core.jobs.enqueuer._queue")
class PackageDeleteTests(TestCase):
    def test_one_blob_job_per_package(self, queue_factory):
        app = make_app()
        packages = [Package.objects.create(app=app, type="bits") for _ in range(2)]

        self.assertEqual(PackageDelete(Package.objects.filter(app=app)).delete(), 2)

        self.assertFalse(Package.objects.filter(app=app).exists())
        self.assertEqual(
            sorted(args for _, _, args in enqueued_jobs(queue_factory)),
            sorted((p.guid, "package_blobstore") for p in packages),
        )


@mock.patch("cc_core.jobs.enqueuer._queue")
class AppDeleteTests(TestCase):
    def setUp(self):
        self.space = make_space()
        self.app = make_app(self.space)
        Process.objects.create(app=self.app, type="web")
        Package.objects.create(app=self.app, type="bits")
        Droplet.objects.create(app=self.app, droplet_hash="abc")
        self.developer = make_user("dev")
        add_role(self.space, self.developer, "developer")

    def test_delete_cascades_and_cleans_blobs(self, queue_factory):
        AppDelete(context_for(self.developer)).delete(self.app.guid)

        self.assertFalse(App.objects.filter(guid=self.app.guid).exists())
        self.assertEqual(Package.objects.count(), 0)
        self.assertEqual(Droplet.objects.count(), 0)
        self.assertEqual(Process.objects.count(), 0)
        blobstores = sorted(args[1] for _, _, args in enqueued_jobs(queue_factory))
        self.assertEqual(blobstores, ["droplet_blobstore", "package_blobstore"])

    def test_missing_app(self, queue_factory):
        with self.assertRaises(AppNotFound):
            AppDelete(context_for(self.developer)).delete("nope")

    def test_unauthorized_delete_changes_nothing(self, queue_factory):
        manager = make_user("manager")
        add_role(self.space, manager, "manager")

        with self.assertRaises(Unauthorized):
            AppDelete(context_for(manager)).delete(self.app.guid)
        self.assertTrue(App.objects.filter(guid=self.app.guid).exists())
        self.assertEqual(Droplet.objects.count(), 1)
        self.assertFalse(queue_factory.called)


@mock.patch("cc_core.jobs.enqueuer._queue")
class DropletsHandlerTests(TestCase):
    def setUp(self):
        self.space = make_space()
        self.app = make_app(self.space)
        self.droplet = Droplet.objects.create(app=self.app, state="STAGED", droplet_hash="abc")
        self.developer = make_user("dev")
        add_role(self.space, self.developer, "developer")

    def test_delete(self, queue_factory):
        deleted = DropletsHandler().delete(self.droplet.guid, context_for(self.developer))

        self.assertEqual(deleted.guid, self.droplet.guid)
        self.assertFalse(Droplet.objects.filter(guid=self.droplet.guid).exists())
        self.assertEqual(
            enqueued_jobs(queue_factory),
            [("cc-generic", "cc_core.jobs.runtime.blobstore_delete", (f"{self.droplet.guid}/abc", "droplet_blobstore"))],
        )

    def test_delete_absent(self, queue_factory):
        self.assertIsNone(DropletsHandler().delete("missing", context_for(self.developer)))

    def test_show_requires_read(self, queue_factory):
        handler = DropletsHandler()
        self.assertEqual(handler.show(self.droplet.guid, context_for(self.developer)).guid, self.droplet.guid)
        with self.assertRaises(Unauthorized):
            handler.show(self.droplet.guid, context_for(make_user("stranger")))

    def test_org_suspended_before_lock_is_honored(self, queue_factory):
        with mock.patch("cc_core.handlers.droplets.locked_app", suspending_lock):
            with self.assertRaises(Unauthorized):
                DropletsHandler().delete(self.droplet.guid, context_for(self.developer))
        self.assertTrue(Droplet.objects.filter(guid=self.droplet.guid).exists())
        self.assertFalse(queue_factory.called)
