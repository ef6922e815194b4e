# ===============================================================================
# LUMICLOUD API APP CONFIGURATION 🛠️
# ===============================================================================

from django.apps import AppConfig


class ApiConfig(AppConfig):
    """
    Configuration for the centralized API app.

    This app provides REST API endpoints for the hosting lifecycle:
    - Customer onboarding, suspension and deletion
    - Billing extension & expiration scanning
    - Website and database provisioning on HestiaCP
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.api"
    label = "platform_api"  # Unique label to avoid conflicts
    verbose_name = "LumiCloud Platform API"
