from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext

from cc_core.models import Process
from cc_core.queries.app_fetcher import AppFetcher
from cc_core.tests.fixtures import add_role, context_for, make_app, make_space, make_user


class AppFetcherTests(TestCase):
    def setUp(self):
        self.space = make_space()
        self.app = make_app(self.space, name="web-app")
        Process.objects.create(app=self.app, type="web", instances=2)
        Process.objects.create(app=self.app, type="worker")

    def test_admin_sees_every_app(self):
        admin = make_user("admin", is_superuser=True)
        other = make_app(make_space(org_status="suspended"))
        fetcher = AppFetcher(context_for(admin))
        self.assertEqual(fetcher.fetch(self.app.guid), self.app)
        self.assertEqual(fetcher.fetch(other.guid), other)

    def test_member_of_active_org_sees_app(self):
        auditor = make_user("auditor")
        add_role(self.space, auditor, "auditor")
        self.assertEqual(AppFetcher(context_for(auditor)).fetch(self.app.guid), self.app)

    def test_member_of_suspended_org_sees_nothing(self):
        space = make_space(org_status="suspended")
        app = make_app(space)
        developer = make_user("dev")
        add_role(space, developer, "developer")
        self.assertIsNone(AppFetcher(context_for(developer)).fetch(app.guid))

    def test_non_member_sees_nothing(self):
        self.assertIsNone(AppFetcher(context_for(make_user("stranger"))).fetch(self.app.guid))

    def test_unknown_guid(self):
        admin = make_user("admin", is_superuser=True)
        self.assertIsNone(AppFetcher(context_for(admin)).fetch("missing"))

    def test_processes_are_loaded_with_the_app(self):
        developer = make_user("dev")
        add_role(self.space, developer, "developer")
        app = AppFetcher(context_for(developer)).fetch(self.app.guid)

        with CaptureQueriesContext(connection) as queries:
            types = [process.type for process in app.processes.all()]
            org_name = app.space.organization.name
        self.assertEqual(types, ["web", "worker"])
        self.assertTrue(org_name)
        self.assertEqual(len(queries), 0)
