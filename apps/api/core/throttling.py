# ===============================================================================
# API THROTTLING CLASSES 🚦
# ===============================================================================

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class StandardAPIThrottle(UserRateThrottle):
    """Standard rate limiting for platform API endpoints"""
    rate = '1000/hour'


class LinkPanelThrottle(UserRateThrottle):
    """Restrictive rate limiting for panel credential checks"""
    rate = '5/min'  # Prevent brute force against the panel


class CronThrottle(AnonRateThrottle):
    """Scheduler endpoints are hit a few times a day at most"""
    rate = '30/hour'
