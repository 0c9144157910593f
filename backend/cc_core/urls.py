from django.urls import path

from . import cc_api

urlpatterns = [
    path("v3/apps/<str:guid>", cc_api.app_detail),
    path("v3/apps/<str:app_guid>/packages", cc_api.app_packages),
    path("v3/packages", cc_api.packages_collection),
    path("v3/packages/<str:guid>", cc_api.package_detail),
    path("v3/packages/<str:guid>/upload", cc_api.package_upload),
    path("v3/droplets/<str:guid>", cc_api.droplet_detail),
    path("v2/syslog_drain_urls", cc_api.syslog_drain_urls),
]
