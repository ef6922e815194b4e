# ===============================================================================
# BILLING API URLS 💳
# ===============================================================================

from django.urls import path

from .views import CustomerBillingAPIView, ExpirationCheckAPIView, cron_check_expired_api

app_name = 'billing'

urlpatterns = [
    path('customers/<int:customer_id>/billing/', CustomerBillingAPIView.as_view(), name='customer-billing'),
    path('customers/check-expiration/', ExpirationCheckAPIView.as_view(), name='check-expiration'),
    path('cron/check-expired/', cron_check_expired_api, name='cron-check-expired'),
]
