# ===============================================================================
# 🧪 DATABASE SERVICE TESTS
# ===============================================================================

from django.test import TestCase

from apps.audit.models import ActivityLog
from apps.common.exceptions import NameCollisionError, NotFoundError, QuotaExceededError, ValidationError
from apps.provisioning.database_service import DatabaseService
from apps.provisioning.models import Database
from tests.factories import create_customer, create_database
from tests.mocks.hestia_mock import MockHestiaGateway


class DatabaseServiceTest(TestCase):
    def setUp(self):
        self.customer = create_customer(email="john@example.com", hestia_username="custjohn1a2b", package_id="business")
        self.gw = MockHestiaGateway()
        self.gw.seed_user("custjohn1a2b")
        self.service = DatabaseService(gateway=self.gw)

    def test_create_database(self):
        database, password = self.service.create_database("john@example.com", "blog").unwrap()

        self.assertEqual(database.name, "custjohn1a2b_blog")
        self.assertEqual(database.username, "custjohn1a2b_blog")
        self.assertEqual(len(password), 16)
        self.assertEqual(database.get_password(), password)
        self.assertNotEqual(database._password, password)
        self.assertIn("custjohn1a2b_blog", self.gw.get_user_state("custjohn1a2b").databases)
        self.assertTrue(ActivityLog.objects.filter(action="database.created").exists())

    def test_invalid_name(self):
        for name in ("", "my-db", "a" * 33, "drop table"):
            with self.subTest(name=name):
                self.assertIsInstance(self.service.create_database("john@example.com", name).unwrap_err(), ValidationError)
        self.assertEqual(self.gw.call_count, 0)

    def test_quota(self):
        for _ in range(3):
            create_database(self.customer)

        error = self.service.create_database("john@example.com", "blog").unwrap_err()

        self.assertIsInstance(error, QuotaExceededError)
        self.assertEqual(error.details, {"limit": 3, "current": 3})

    def test_name_collision(self):
        create_database(self.customer, name="custjohn1a2b_blog")

        self.assertIsInstance(self.service.create_database("john@example.com", "blog").unwrap_err(), NameCollisionError)

    def test_panel_failure_writes_nothing(self):
        self.gw.fail_commands = {"v-add-database": 17}

        self.assertTrue(self.service.create_database("john@example.com", "blog").is_err())
        self.assertFalse(Database.objects.exists())

    def test_list_databases(self):
        self.service.create_database("john@example.com", "blog")

        listing = self.service.list_databases("john@example.com").unwrap()

        self.assertEqual([db.name for db in listing["local"]], ["custjohn1a2b_blog"])
        self.assertIn("custjohn1a2b_blog", listing["hestia"])

    def test_list_databases_panel_unavailable(self):
        self.gw.transport_failures = {"v-list-databases": 1}
        create_database(self.customer)

        listing = self.service.list_databases("john@example.com").unwrap()

        self.assertEqual(len(listing["local"]), 1)
        self.assertEqual(listing["hestia"], {})

    def test_delete_database(self):
        database, _ = self.service.create_database("john@example.com", "blog").unwrap()

        self.assertEqual(self.service.delete_database("john@example.com", database.pk).unwrap(), "custjohn1a2b_blog")
        self.assertFalse(Database.objects.exists())
        self.assertEqual(self.gw.get_user_state("custjohn1a2b").databases, [])

    def test_delete_foreign_database(self):
        foreign = create_database(create_customer())

        self.assertIsInstance(self.service.delete_database("john@example.com", foreign.pk).unwrap_err(), NotFoundError)

    def test_unknown_customer(self):
        self.assertIsInstance(self.service.list_databases("nobody@example.com").unwrap_err(), NotFoundError)
