# ===============================================================================
# LUMICLOUD PLATFORM API - CENTRALIZED API MODULE 🚀
# ===============================================================================
#
# Structure:
#   - api/core/      → Shared API infrastructure (permissions, responses, throttling)
#   - api/customers/ → Customer onboarding, suspension and panel linking
#   - api/billing/   → Subscription extension and expiration scans
#   - api/websites/  → Website provisioning, custom domains, SSL
#   - api/databases/ → Customer databases
#
# Import Direction (CRITICAL):
#   api → apps.{domain}.services → apps.{domain}.models
#   Never import api modules from domain apps to avoid circular dependencies
#
