from django.contrib import admin

from .actions.droplet_delete import DropletDelete
from .actions.package_delete import PackageDelete
from .models import App, Droplet, Organization, Package, Process, ServiceBinding, Space, SpaceMembership


class SpaceMembershipInline(admin.TabularInline):
    model = SpaceMembership
    extra = 0
    fields = ("user", "role", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("name", "guid", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "guid")


@admin.register(Space)
class SpaceAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "guid", "created_at")
    search_fields = ("name", "guid", "organization__name")
    inlines = [SpaceMembershipInline]


@admin.register(App)
class AppAdmin(admin.ModelAdmin):
    list_display = ("name", "guid", "space", "created_at")
    search_fields = ("name", "guid")


@admin.register(Process)
class ProcessAdmin(admin.ModelAdmin):
    list_display = ("app", "type", "instances", "created_at")


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    list_display = ("guid", "app", "type", "state", "package_hash", "created_at")
    list_filter = ("type", "state")
    search_fields = ("guid", "app__guid", "app__name")
    readonly_fields = ("package_hash", "created_at", "updated_at")

    def delete_model(self, request, obj):
        PackageDelete(Package.objects.filter(pk=obj.pk)).delete()

    def delete_queryset(self, request, queryset):
        PackageDelete(queryset).delete()


@admin.register(Droplet)
class DropletAdmin(admin.ModelAdmin):
    list_display = ("guid", "app", "state", "droplet_hash", "created_at")
    list_filter = ("state",)
    search_fields = ("guid", "app__guid")

    def delete_model(self, request, obj):
        DropletDelete(Droplet.objects.filter(pk=obj.pk)).delete()

    def delete_queryset(self, request, queryset):
        DropletDelete(queryset).delete()


@admin.register(ServiceBinding)
class ServiceBindingAdmin(admin.ModelAdmin):
    list_display = ("app", "service_instance_name", "syslog_drain_url", "created_at")
    search_fields = ("app__name", "service_instance_name")
