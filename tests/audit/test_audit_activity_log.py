# ===============================================================================
# 🧪 ACTIVITY LOG TESTS
# ===============================================================================

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from apps.audit.models import SYSTEM_ACTOR_IP, ActivityLog
from apps.audit.services import (
    ActivityContext,
    ActivityEntry,
    ActivityLogService,
    serialize_metadata,
)
from tests.factories import create_admin, create_customer


class MetadataSerializationTest(SimpleTestCase):
    def test_rich_types(self):
        value = uuid.uuid4()
        metadata = serialize_metadata(
            {
                "id": value,
                "when": datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
                "price": Decimal("25000.00"),
                "months": 3,
            }
        )

        self.assertEqual(metadata["id"], str(value))
        self.assertEqual(metadata["when"], "2025-01-15T12:00:00+00:00")
        self.assertEqual(metadata["price"], "25000.00")
        self.assertEqual(metadata["months"], 3)

    def test_empty(self):
        self.assertEqual(serialize_metadata({}), {})

    def test_unserializable_value_is_reported(self):
        metadata = serialize_metadata({"callback": object()})
        self.assertIn("serialization_error", metadata)
        self.assertEqual(metadata["original_keys"], ["callback"])


class ActivityLogServiceTest(TestCase):
    def test_log_with_user(self):
        admin = create_admin()
        customer = create_customer()

        entry = ActivityLogService.log(
            ActivityEntry(
                action="customer.suspended",
                resource="customer",
                resource_id=customer.pk,
                description="Suspended",
                metadata={"customer": customer},
            ),
            ActivityContext(user=admin, ip_address="203.0.113.7"),
        )

        self.assertEqual(entry.user, admin)
        self.assertEqual(entry.ip_address, "203.0.113.7")
        self.assertEqual(entry.resource_id, str(customer.pk))
        self.assertEqual(entry.metadata["customer"], f"Customer(pk={customer.pk})")
        self.assertFalse(entry.is_system)
        self.assertEqual(ActivityLogService.for_resource("customer", customer.pk), [entry])

    def test_system_actor_by_default(self):
        entry = ActivityLogService.log(
            ActivityEntry(action="customer.auto_suspended", resource="customer", resource_id=1, description="x")
        )

        self.assertIsNone(entry.user)
        self.assertEqual(entry.ip_address, SYSTEM_ACTOR_IP)
        self.assertTrue(entry.is_system)
        self.assertIn("System", str(entry))


class ActivityLogImmutabilityTest(TestCase):
    def setUp(self):
        self.entry = ActivityLogService.log(
            ActivityEntry(action="billing.extended", resource="customer", resource_id=7, description="Extended")
        )

    def test_update_rejected(self):
        self.entry.description = "changed"
        with self.assertRaises(PermissionError):
            self.entry.save()

    def test_delete_rejected(self):
        with self.assertRaises(PermissionError):
            self.entry.delete()

    def test_bulk_delete_rejected(self):
        with self.assertRaises(PermissionError):
            ActivityLog.objects.all().delete()
        self.assertEqual(ActivityLog.objects.count(), 1)
