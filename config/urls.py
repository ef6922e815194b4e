"""
URL configuration for the LumiCloud platform
Admin site plus the JSON API.
"""

from django.contrib import admin
from django.urls import include, path

# ===============================================================================
# MAIN URL PATTERNS
# ===============================================================================

urlpatterns = [
    path("admin/", admin.site.urls),
    # JSON API (customers, websites, databases, billing, cron)
    path("api/", include("apps.api.urls")),
]
