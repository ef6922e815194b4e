# ===============================================================================
# LUMICLOUD API MAIN URLS 🚀
# ===============================================================================
#
# Central API routing for all platform domains.
#
# URL Structure:
#   /api/customers/  → Customer lifecycle APIs (+ billing sub-resources)
#   /api/cron/       → Scheduler entry points (shared secret)
#   /api/websites/   → Website provisioning APIs
#   /api/databases/  → Database APIs
#   /api/dns/        → DNS records of the signed-in customer
#   /api/mail/       → Mail accounts of the signed-in customer
#   /api/backups/    → Panel account backups
#   /api/activity/   → Activity log (admin)
#

from django.urls import include, path

from .activity import urls as activity_urls
from .backups import urls as backup_urls
from .billing import urls as billing_urls
from .customers import urls as customer_urls
from .databases import urls as database_urls
from .dns import urls as dns_urls
from .mail import urls as mail_urls
from .websites import urls as website_urls

app_name = 'api'

# ===============================================================================
# API ROUTING 📍
# ===============================================================================

urlpatterns = [
    # Billing routes live under /customers/ and /cron/, so they are matched first
    path('', include((billing_urls, 'billing'))),

    # Customer Management APIs
    path('customers/', include((customer_urls, 'customers'))),

    # Website Provisioning APIs
    path('websites/', include((website_urls, 'websites'))),

    # Database APIs
    path('databases/', include((database_urls, 'databases'))),

    # Customer self-service on the panel
    path('dns/', include((dns_urls, 'dns'))),
    path('mail/', include((mail_urls, 'mail'))),
    path('backups/', include((backup_urls, 'backups'))),

    # Activity Log
    path('activity/', include((activity_urls, 'activity'))),
]
