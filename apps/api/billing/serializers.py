# ===============================================================================
# BILLING API SERIALIZERS 💳
# ===============================================================================

from rest_framework import serializers


class BillingExtensionSerializer(serializers.Serializer):
    """Range (1-12) is enforced by the extension service so every caller gets the same message"""

    months = serializers.IntegerField()
