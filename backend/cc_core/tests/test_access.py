from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from cc_core.access import ADMIN, ADMIN_READ_ONLY, READ, WRITE, AccessContext
from cc_core.models import Package
from cc_core.tests.fixtures import add_role, make_app, make_space, make_user


class AccessContextTests(TestCase):
    def setUp(self):
        self.space = make_space()
        self.app = make_app(self.space)
        self.package = Package(app=self.app, type="bits")

    def test_session_user_capabilities(self):
        self.assertEqual(AccessContext.for_user(make_user("plain")).capabilities, {READ, WRITE})
        self.assertIn(ADMIN, AccessContext.for_user(make_user("root", is_superuser=True)).capabilities)
        self.assertIn(ADMIN_READ_ONLY, AccessContext.for_user(make_user("ops", is_staff=True)).capabilities)

    def test_anonymous_has_nothing(self):
        ctx = AccessContext.for_user(AnonymousUser())
        self.assertEqual(ctx.capabilities, frozenset())
        self.assertTrue(ctx.cannot("read", self.package))
        self.assertFalse(ctx.spaces().exists())

    def test_token_scopes_replace_session_capabilities(self):
        user = make_user("bot", is_superuser=True)
        ctx = AccessContext.for_user(user, [READ])
        self.assertFalse(ctx.is_admin)

    def test_developer_may_write(self):
        dev = make_user("dev")
        add_role(self.space, dev, "developer")
        ctx = AccessContext.for_user(dev)
        self.assertTrue(ctx.can("create", self.package, self.app, self.space))
        self.assertTrue(ctx.can("delete", self.package))
        self.assertTrue(ctx.can("read", self.package))

    def test_write_needs_write_capability(self):
        dev = make_user("dev")
        add_role(self.space, dev, "developer")
        ctx = AccessContext.for_user(dev, [READ])
        self.assertTrue(ctx.cannot("create", self.package, self.app, self.space))

    def test_auditor_and_manager_only_read(self):
        for role in ("auditor", "manager"):
            with self.subTest(role=role):
                user = make_user(role)
                add_role(self.space, user, role)
                ctx = AccessContext.for_user(user)
                self.assertTrue(ctx.can("read", self.package))
                self.assertTrue(ctx.cannot("delete", self.package, self.app, self.space))

    def test_suspended_org_blocks_members(self):
        space = make_space(org_status="suspended")
        package = Package(app=make_app(space), type="bits")
        dev = make_user("dev")
        add_role(space, dev, "developer")
        ctx = AccessContext.for_user(dev)
        self.assertTrue(ctx.cannot("read", package))
        self.assertTrue(ctx.cannot("create", package))

    def test_admin_ignores_roles(self):
        ctx = AccessContext.for_user(make_user("root", is_superuser=True))
        self.assertTrue(ctx.can("delete", self.package, self.app, self.space))
        self.assertTrue(ctx.has_global_read)

    def test_read_only_admin_cannot_write(self):
        ctx = AccessContext.for_user(make_user("ops", is_staff=True))
        self.assertTrue(ctx.can("read", self.package))
        self.assertTrue(ctx.cannot("create", self.package, self.app, self.space))

    def test_unknown_action(self):
        ctx = AccessContext.for_user(make_user("root", is_superuser=True))
        self.assertFalse(ctx.can("rename", self.package))
