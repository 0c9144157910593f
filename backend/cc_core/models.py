import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


def _new_guid() -> str:
    return str(uuid.uuid4())


class Organization(models.Model):
    STATUS_CHOICES = [
        ("active", "Active"),
        ("suspended", "Suspended"),
    ]

    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    name = models.CharField(max_length=255, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class Space(models.Model):
    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    name = models.CharField(max_length=255)
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name="spaces")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["organization__name", "name"]
        unique_together = ("organization", "name")

    def __str__(self) -> str:
        return f"{self.organization.name}/{self.name}"


class SpaceMembership(models.Model):
    ROLE_CHOICES = [
        ("developer", "Space Developer"),
        ("manager", "Space Manager"),
        ("auditor", "Space Auditor"),
    ]

    space = models.ForeignKey(Space, on_delete=models.CASCADE, related_name="memberships")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="space_memberships")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="developer")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("space", "user", "role")

    def __str__(self) -> str:
        return f"{self.space_id}:{self.user_id}:{self.role}"


class App(models.Model):
    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    name = models.CharField(max_length=255)
    space = models.ForeignKey(Space, on_delete=models.CASCADE, related_name="apps")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        unique_together = ("space", "name")

    def __str__(self) -> str:
        return self.name


class Process(models.Model):
    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    app = models.ForeignKey(App, on_delete=models.CASCADE, related_name="processes")
    type = models.CharField(max_length=64, default="web")
    instances = models.PositiveIntegerField(default=1)
    command = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        unique_together = ("app", "type")

    def __str__(self) -> str:
        return f"{self.app.name}:{self.type}"


class Package(models.Model):
    BITS = "bits"
    DOCKER = "docker"
    TYPE_CHOICES = [
        (BITS, "Bits"),
        (DOCKER, "Docker"),
    ]

    CREATED_STATE = "CREATED"
    PENDING_STATE = "PENDING"
    READY_STATE = "READY"
    FAILED_STATE = "FAILED"
    STATE_CHOICES = [
        (CREATED_STATE, "Created"),
        (PENDING_STATE, "Pending"),
        (READY_STATE, "Ready"),
        (FAILED_STATE, "Failed"),
    ]

    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    app = models.ForeignKey(App, to_field="guid", db_column="app_guid", on_delete=models.CASCADE, related_name="packages")
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    url = models.TextField(null=True, blank=True)
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default=CREATED_STATE)
    package_hash = models.CharField(max_length=255, null=True, blank=True)
    error = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.type}:{self.guid}"

    def clean(self):
        if self.type == self.BITS and self.url is not None:
            raise ValidationError({"url": "must be empty for bits packages"})
        if self.type == self.DOCKER and not self.url:
            raise ValidationError({"url": "is required for docker packages"})
        if self.type == self.DOCKER and self.state != self.READY_STATE:
            raise ValidationError({"state": "docker packages are always READY"})

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False)
        super().save(*args, **kwargs)


class Droplet(models.Model):
    STAGED_STATE = "STAGED"
    FAILED_STATE = "FAILED"
    PENDING_STATE = "PENDING"
    STATE_CHOICES = [
        (PENDING_STATE, "Pending"),
        (STAGED_STATE, "Staged"),
        (FAILED_STATE, "Failed"),
    ]

    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    app = models.ForeignKey(App, to_field="guid", db_column="app_guid", on_delete=models.CASCADE, related_name="droplets")
    package = models.ForeignKey(
        Package,
        to_field="guid",
        db_column="package_guid",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="droplets",
    )
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default=PENDING_STATE)
    droplet_hash = models.CharField(max_length=255, null=True, blank=True)
    error = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.guid

    @staticmethod
    def key_for(guid: str, droplet_hash) -> str:
        if not droplet_hash:
            return guid
        return f"{guid}/{droplet_hash}"

    @property
    def blobstore_key(self) -> str:
        return self.key_for(self.guid, self.droplet_hash)


class ServiceBinding(models.Model):
    guid = models.CharField(max_length=64, unique=True, default=_new_guid, editable=False)
    app = models.ForeignKey(App, on_delete=models.CASCADE, related_name="service_bindings")
    service_instance_name = models.CharField(max_length=255)
    syslog_drain_url = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.app.name}:{self.service_instance_name}"
