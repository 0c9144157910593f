import uuid
from contextlib import contextmanager
from typing import List, Tuple

from django.contrib.auth import get_user_model

from cc_core.access import AccessContext
from cc_core.locking import locked_app
from cc_core.models import App, Organization, Space, SpaceMembership


def make_space(org_status: str = "active") -> Space:
    org = Organization.objects.create(name=f"org-{uuid.uuid4().hex[:8]}", status=org_status)
    return Space.objects.create(name="dev", organization=org)


def make_app(space: Space = None, name: str = "") -> App:
    space = space or make_space()
    return App.objects.create(name=name or f"app-{uuid.uuid4().hex[:8]}", space=space)


def make_user(username: str, **extra):
    return get_user_model().objects.create_user(username=username, password="x", **extra)


def add_role(space: Space, user, role: str = "developer") -> SpaceMembership:
    return SpaceMembership.objects.create(space=space, user=user, role=role)


def context_for(user, scopes=None) -> AccessContext:
    return AccessContext.for_user(user, scopes)


def enqueued_jobs(queue_factory) -> List[Tuple[str, str, tuple]]:
    """(queue name, func path, args) for every job pushed through a patched ``_queue``."""
    queues = [call.args[0] for call in queue_factory.call_args_list]
    jobs = queue_factory.return_value.enqueue.call_args_list
    return [(queue, call.args[0], tuple(call.args[1:])) for queue, call in zip(queues, jobs)]


@contextmanager
def suspending_lock(app: App):
    """``locked_app`` that suspends the app's org between the unlocked read and the lock."""
    Organization.objects.filter(pk=app.space.organization_id).update(status="suspended")
    with locked_app(app) as locked:
        yield locked
