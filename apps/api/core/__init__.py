# ===============================================================================
# API CORE INFRASTRUCTURE - SHARED BASE CLASSES 🏗️
# ===============================================================================

from .permissions import HasCronSecret, IsAdminRole
from .responses import activity_context, error_response, success_response, validation_error_response
from .throttling import CronThrottle, LinkPanelThrottle, StandardAPIThrottle

# Export public API
__all__ = [
    'CronThrottle',
    'HasCronSecret',
    'IsAdminRole',
    'LinkPanelThrottle',
    'StandardAPIThrottle',
    'activity_context',
    'error_response',
    'success_response',
    'validation_error_response',
]
