# ===============================================================================
# DATABASE API URLS 🗄️
# ===============================================================================

from django.urls import path

from .views import DatabaseDetailAPIView, DatabaseListCreateAPIView

app_name = 'databases'

urlpatterns = [
    path('', DatabaseListCreateAPIView.as_view(), name='database-list'),
    path('<int:database_id>/', DatabaseDetailAPIView.as_view(), name='database-detail'),
]
