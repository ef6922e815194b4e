# ===============================================================================
# 🧪 BILLING EXTENSION TESTS
# ===============================================================================
"""
Subscription extension: month arithmetic, validation, reactivation of
suspended accounts and the billing info view model.
"""

from datetime import UTC, datetime, timedelta

from django.test import SimpleTestCase, TestCase

from apps.audit.models import ActivityLog
from apps.billing.services import BillingExtensionService, calculate_new_expiry, days_between
from apps.common.exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.customers.models import Customer
from tests.factories import create_admin, create_customer, create_customer_user
from tests.mocks.hestia_mock import MockHestiaGateway

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


class ExpiryArithmeticTest(SimpleTestCase):
    def test_extends_from_future_expiry(self):
        current = datetime(2025, 3, 1, tzinfo=UTC)
        self.assertEqual(calculate_new_expiry(current, 2, NOW), datetime(2025, 5, 1, tzinfo=UTC))

    def test_extends_from_now_when_expired(self):
        expired = NOW - timedelta(days=10)
        self.assertEqual(calculate_new_expiry(expired, 1, NOW), datetime(2025, 2, 15, 12, 0, tzinfo=UTC))

    def test_extends_from_now_without_expiry(self):
        self.assertEqual(calculate_new_expiry(None, 12, NOW), datetime(2026, 1, 15, 12, 0, tzinfo=UTC))

    def test_month_end_clamps(self):
        jan_31 = datetime(2025, 1, 31, tzinfo=UTC)
        self.assertEqual(calculate_new_expiry(jan_31, 1, NOW), datetime(2025, 2, 28, tzinfo=UTC))

    def test_days_between_rounds_up(self):
        self.assertEqual(days_between(NOW, NOW + timedelta(days=2, hours=1)), 3)
        self.assertEqual(days_between(NOW, NOW + timedelta(days=2)), 2)


class BillingExtensionServiceTest(TestCase):
    def setUp(self):
        self.admin = create_admin()
        self.gw = MockHestiaGateway()
        self.service = BillingExtensionService(gateway=self.gw)

    def test_extend_active_customer(self):
        customer = create_customer(expires_at=NOW + timedelta(days=5))

        outcome = self.service.extend(customer.pk, 3, self.admin, now=NOW).unwrap()

        customer.refresh_from_db()
        self.assertEqual(customer.expires_at, datetime(2025, 4, 20, 12, 0, tzinfo=UTC))
        self.assertEqual(customer.next_billing_date, customer.expires_at)
        self.assertIsNone(outcome.remote_reactivation)
        self.assertEqual(self.gw.call_count, 0)

        entry = ActivityLog.objects.get(action="billing.extended")
        self.assertEqual(entry.metadata["months"], 3)
        self.assertFalse(entry.metadata["was_suspended"])

    def test_extend_suspended_customer_reactivates(self):
        customer = create_customer(status=Customer.STATUS_SUSPENDED, expires_at=NOW - timedelta(days=3))
        self.gw.seed_user(customer.hestia_username, suspended=True)

        outcome = self.service.extend(customer.pk, 1, self.admin, now=NOW).unwrap()

        customer.refresh_from_db()
        self.assertEqual(customer.status, Customer.STATUS_ACTIVE)
        self.assertEqual(customer.expires_at, datetime(2025, 2, 15, 12, 0, tzinfo=UTC))
        self.assertTrue(outcome.remote_reactivation.success)
        self.assertFalse(self.gw.get_user_state(customer.hestia_username).suspended)

    def test_reactivation_failure_still_extends(self):
        customer = create_customer(status=Customer.STATUS_SUSPENDED, expires_at=NOW - timedelta(days=3))
        self.gw.fail_commands = {"v-unsuspend-user": 3}

        outcome = self.service.extend(customer.pk, 1, self.admin, now=NOW).unwrap()

        customer.refresh_from_db()
        self.assertEqual(customer.status, Customer.STATUS_ACTIVE)
        self.assertTrue(outcome.reactivation_failed)
        self.assertFalse(outcome.to_dict()["remote_reactivation"]["success"])
        self.assertTrue(ActivityLog.objects.get(action="billing.extended").metadata["remote_reactivation_failed"])

    def test_months_out_of_range(self):
        customer = create_customer()
        for months in (0, 13, -1, "3", 2.5, True):
            with self.subTest(months=months):
                error = self.service.extend(customer.pk, months, self.admin).unwrap_err()
                self.assertIsInstance(error, ValidationError)
                self.assertEqual(error.message, "Months must be between 1 and 12")
        self.assertFalse(ActivityLog.objects.exists())

    def test_requires_admin(self):
        customer = create_customer()
        error = self.service.extend(customer.pk, 1, create_customer_user()).unwrap_err()
        self.assertIsInstance(error, AuthorizationError)

    def test_unknown_customer(self):
        self.assertIsInstance(self.service.extend(424242, 1, self.admin).unwrap_err(), NotFoundError)


class BillingInfoTest(TestCase):
    def test_billing_info(self):
        customer = create_customer(expires_at=NOW + timedelta(days=9, hours=2))

        info = BillingExtensionService.billing_info(customer.pk, now=NOW).unwrap()

        self.assertEqual(info["days_remaining"], 10)
        self.assertFalse(info["is_expired"])
        self.assertEqual(info["customer"]["email"], customer.email)

    def test_expired_customer(self):
        customer = create_customer(expires_at=NOW - timedelta(days=1))

        info = BillingExtensionService.billing_info(customer.pk, now=NOW).unwrap()

        self.assertTrue(info["is_expired"])
        self.assertLess(info["days_remaining"], 0)

    def test_without_expiry(self):
        info = BillingExtensionService.billing_info(create_customer().pk, now=NOW).unwrap()
        self.assertIsNone(info["days_remaining"])
        self.assertFalse(info["is_expired"])
