# ===============================================================================
# BACKUP API URLS 💾
# ===============================================================================

from django.urls import path

from .views import BackupAPIView

app_name = 'backups'

urlpatterns = [
    path('', BackupAPIView.as_view(), name='backups'),
]
