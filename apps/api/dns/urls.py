# ===============================================================================
# DNS API URLS 🧭
# ===============================================================================

from django.urls import path

from .views import DnsRecordAPIView

app_name = 'dns'

urlpatterns = [
    path('', DnsRecordAPIView.as_view(), name='dns-records'),
]
