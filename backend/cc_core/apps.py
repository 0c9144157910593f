from django.apps import AppConfig


class CloudControllerCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cc_core"
    label = "cc_core"
    verbose_name = "Cloud Controller"
