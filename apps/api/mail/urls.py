# ===============================================================================
# MAIL API URLS ✉️
# ===============================================================================

from django.urls import path

from .views import MailAccountAPIView

app_name = 'mail'

urlpatterns = [
    path('', MailAccountAPIView.as_view(), name='mail-accounts'),
]
