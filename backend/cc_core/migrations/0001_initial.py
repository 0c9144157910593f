from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

import cc_core.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("name", models.CharField(max_length=255, unique=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("suspended", "Suspended")], default="active", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Space",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="spaces",
                        to="cc_core.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["organization__name", "name"],
                "unique_together": {("organization", "name")},
            },
        ),
        migrations.CreateModel(
            name="SpaceMembership",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[("developer", "Space Developer"), ("manager", "Space Manager"), ("auditor", "Space Auditor")],
                        default="developer",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "space",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="cc_core.space",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="space_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "unique_together": {("space", "user", "role")},
            },
        ),
        migrations.CreateModel(
            name="App",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "space",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="apps",
                        to="cc_core.space",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "unique_together": {("space", "name")},
            },
        ),
        migrations.CreateModel(
            name="Process",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("type", models.CharField(default="web", max_length=64)),
                ("instances", models.PositiveIntegerField(default=1)),
                ("command", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "app",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="processes",
                        to="cc_core.app",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "unique_together": {("app", "type")},
            },
        ),
        migrations.CreateModel(
            name="Package",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("type", models.CharField(choices=[("bits", "Bits"), ("docker", "Docker")], max_length=20)),
                ("url", models.TextField(blank=True, null=True)),
                (
                    "state",
                    models.CharField(
                        choices=[("CREATED", "Created"), ("PENDING", "Pending"), ("READY", "Ready"), ("FAILED", "Failed")],
                        default="CREATED",
                        max_length=20,
                    ),
                ),
                ("package_hash", models.CharField(blank=True, max_length=255, null=True)),
                ("error", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "app",
                    models.ForeignKey(
                        db_column="app_guid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="packages",
                        to="cc_core.app",
                        to_field="guid",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Droplet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                (
                    "state",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("STAGED", "Staged"), ("FAILED", "Failed")],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("droplet_hash", models.CharField(blank=True, max_length=255, null=True)),
                ("error", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "app",
                    models.ForeignKey(
                        db_column="app_guid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="droplets",
                        to="cc_core.app",
                        to_field="guid",
                    ),
                ),
                (
                    "package",
                    models.ForeignKey(
                        blank=True,
                        db_column="package_guid",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="droplets",
                        to="cc_core.package",
                        to_field="guid",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="ServiceBinding",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guid", models.CharField(default=cc_core.models._new_guid, editable=False, max_length=64, unique=True)),
                ("service_instance_name", models.CharField(max_length=255)),
                ("syslog_drain_url", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "app",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="service_bindings",
                        to="cc_core.app",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
