# ===============================================================================
# 🧪 HOSTING PACKAGE CATALOG TESTS
# ===============================================================================

from django.test import SimpleTestCase

from apps.products.packages import (
    DEFAULT_DATABASE_LIMIT,
    DEFAULT_WEBSITE_LIMIT,
    PACKAGES,
    database_limit,
    format_disk_space,
    format_limit,
    get_package,
    website_limit,
)


class PackageCatalogTest(SimpleTestCase):
    def test_package_ids_are_unique(self):
        ids = [package.id for package in PACKAGES]
        self.assertEqual(len(ids), len(set(ids)))

    def test_limits(self):
        self.assertEqual((website_limit("starter"), database_limit("starter")), (1, 1))
        self.assertEqual((website_limit("business"), database_limit("business")), (3, 3))
        self.assertEqual((website_limit("enterprise"), database_limit("enterprise")), (7, 7))

    def test_unknown_package_falls_back_to_default_limit(self):
        self.assertIsNone(get_package("platinum"))
        self.assertIsNone(get_package(""))
        self.assertEqual(website_limit("platinum"), DEFAULT_WEBSITE_LIMIT)
        self.assertEqual(database_limit(None), DEFAULT_DATABASE_LIMIT)

    def test_allows(self):
        business = get_package("business")
        self.assertTrue(business.allows("websites", 2))
        self.assertFalse(business.allows("websites", 3))
        # 0 means unlimited
        self.assertTrue(business.allows("subdomains", 500))


class PackageFormattingTest(SimpleTestCase):
    def test_format_limit(self):
        self.assertEqual(format_limit(0), "Unlimited")
        self.assertEqual(format_limit(5), "5")

    def test_format_disk_space(self):
        self.assertEqual(format_disk_space(500), "500 MB")
        self.assertEqual(format_disk_space(2048), "2.00 GB")
