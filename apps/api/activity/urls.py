# ===============================================================================
# ACTIVITY LOG API URLS 📋
# ===============================================================================

from django.urls import path

from .views import ActivityLogListAPIView

app_name = 'activity'

urlpatterns = [
    path('', ActivityLogListAPIView.as_view(), name='activity-list'),
]
