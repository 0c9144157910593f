from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Optional, Set

from django.db.models import QuerySet

from .models import App, Droplet, Package, Space, SpaceMembership

ADMIN = "cloud_controller.admin"
ADMIN_READ_ONLY = "cloud_controller.admin_read_only"
GLOBAL_AUDITOR = "cloud_controller.global_auditor"
READ = "cloud_controller.read"
WRITE = "cloud_controller.write"

GLOBAL_READ_CAPABILITIES = {ADMIN, ADMIN_READ_ONLY, GLOBAL_AUDITOR}
READ_ROLES = {"developer", "manager", "auditor"}
WRITE_ROLES = {"developer"}


def _space_of(obj: Any) -> Optional[Space]:
    if isinstance(obj, Space):
        return obj
    if isinstance(obj, App):
        return obj.space
    if isinstance(obj, (Package, Droplet)):
        return obj.app.space
    return None


@dataclass(frozen=True)
class AccessContext:
    user: Any
    capabilities: FrozenSet[str]

    @classmethod
    def for_user(cls, user, scopes: Optional[Iterable[str]] = None) -> "AccessContext":
        if user is None or not getattr(user, "is_authenticated", False):
            return cls(user=user, capabilities=frozenset())
        if scopes is not None:
            return cls(user=user, capabilities=frozenset(scopes))
        caps: Set[str] = {READ, WRITE}
        if getattr(user, "is_superuser", False):
            caps.add(ADMIN)
        elif getattr(user, "is_staff", False):
            caps.add(ADMIN_READ_ONLY)
        return cls(user=user, capabilities=frozenset(caps))

    @classmethod
    def for_request(cls, request) -> "AccessContext":
        return cls.for_user(getattr(request, "user", None), getattr(request, "token_scopes", None))

    @property
    def is_admin(self) -> bool:
        return ADMIN in self.capabilities

    @property
    def has_global_read(self) -> bool:
        return bool(self.capabilities & GLOBAL_READ_CAPABILITIES)

    def space_roles(self, space: Space) -> Set[str]:
        if self.user is None or not getattr(self.user, "is_authenticated", False):
            return set()
        return set(
            SpaceMembership.objects.filter(space=space, user=self.user).values_list("role", flat=True)
        )

    def spaces(self) -> QuerySet:
        if self.user is None or not getattr(self.user, "is_authenticated", False):
            return Space.objects.none()
        return Space.objects.filter(memberships__user=self.user).distinct()

    def can(self, action: str, resource: Any, *scope: Any) -> bool:
        if action == "read":
            if self.has_global_read:
                return True
            return READ in self.capabilities and self._has_role(READ_ROLES, resource, scope)
        if action in ("create", "delete", "update"):
            if self.is_admin:
                return True
            return WRITE in self.capabilities and self._has_role(WRITE_ROLES, resource, scope)
        return False

    def cannot(self, action: str, resource: Any, *scope: Any) -> bool:
        return not self.can(action, resource, *scope)

    def _has_role(self, roles: Set[str], resource: Any, scope) -> bool:
        space = next((item for item in scope if isinstance(item, Space)), None) or _space_of(resource)
        if space is None:
            return False
        if not space.organization.is_active:
            return False
        return bool(self.space_roles(space) & roles)
