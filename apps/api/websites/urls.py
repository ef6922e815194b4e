# ===============================================================================
# WEBSITE API URLS 🌐
# ===============================================================================

from django.urls import path

from .views import (
    CustomDomainAPIView,
    DocumentRootAPIView,
    WebsiteDetailAPIView,
    WebsiteListCreateAPIView,
    WebsiteSSLAPIView,
)

app_name = 'websites'

urlpatterns = [
    path('', WebsiteListCreateAPIView.as_view(), name='website-list'),
    path('custom-domain/', CustomDomainAPIView.as_view(), name='custom-domain'),
    path('document-root/', DocumentRootAPIView.as_view(), name='document-root'),
    path('<int:website_id>/', WebsiteDetailAPIView.as_view(), name='website-detail'),
    path('<int:website_id>/ssl/', WebsiteSSLAPIView.as_view(), name='website-ssl'),
]
