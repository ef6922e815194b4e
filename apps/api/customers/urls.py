# ===============================================================================
# CUSTOMER API URLS 🔗
# ===============================================================================

from django.urls import path

from .views import CustomerDetailAPIView, CustomerListCreateAPIView, CustomerSuspensionAPIView, link_panel_api

app_name = 'customers'

urlpatterns = [
    path('', CustomerListCreateAPIView.as_view(), name='customer-list'),
    path('link-panel/', link_panel_api, name='link-panel'),
    path('<int:customer_id>/', CustomerDetailAPIView.as_view(), name='customer-detail'),
    path('<int:customer_id>/suspend/', CustomerSuspensionAPIView.as_view(), name='customer-suspend'),
]
