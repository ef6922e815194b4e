# ===============================================================================
# 🧪 HESTIA COMMAND TESTS
# ===============================================================================
"""
Tests for the closed set of Hestia panel commands: program names, positional
argument layout and secret masking.
"""

from django.test import SimpleTestCase

from apps.provisioning.hestia_commands import (
    AddDatabase,
    AddDnsRecord,
    AddLetsEncryptDomain,
    AddUser,
    AddWebDomain,
    AddWebDomainAlias,
    ChangeWebDomainBackendTpl,
    ChangeWebDomainDocroot,
    ListDatabases,
    ListUsers,
    ListWebDomains,
    ResetWebDomainDocroot,
    SuspendUser,
    UnsuspendUser,
)


class UserCommandTest(SimpleTestCase):
    def test_suspend_user_never_restarts_services(self):
        command = SuspendUser("custjohn1a2b")
        self.assertEqual(command.program, "v-suspend-user")
        self.assertEqual(command.args(), ("custjohn1a2b", "no"))

    def test_unsuspend_user(self):
        self.assertEqual(UnsuspendUser("custjohn1a2b").args(), ("custjohn1a2b", "no"))

    def test_add_user_masks_password_in_str(self):
        command = AddUser("custjohn1a2b", "s3cret!", "john@example.com", "Starter", "John", "Doe")
        self.assertEqual(command.args()[1], "s3cret!")
        self.assertNotIn("s3cret!", str(command))
        self.assertIn("***", str(command))
        self.assertTrue(str(command).startswith("v-add-user custjohn1a2b"))

    def test_list_users_requests_json(self):
        self.assertTrue(ListUsers.returns_data)
        self.assertEqual(ListUsers().args(), ("json",))


class WebDomainCommandTest(SimpleTestCase):
    def test_add_web_domain_joins_aliases(self):
        command = AddWebDomain("u1", "site.lumicloude.my.id", aliases=("www.site.lumicloude.my.id", "example.com"))
        self.assertEqual(
            command.args(),
            ("u1", "site.lumicloude.my.id", "", "yes", "www.site.lumicloude.my.id,example.com"),
        )

    def test_add_alias_restarts(self):
        command = AddWebDomainAlias("u1", "site.lumicloude.my.id", ("example.com",))
        self.assertEqual(command.args(), ("u1", "site.lumicloude.my.id", "example.com", "yes"))

    def test_backend_template_name(self):
        command = ChangeWebDomainBackendTpl("u1", "site.lumicloude.my.id", "8.2")
        self.assertEqual(command.args()[-1], "PHP-8_2")

    def test_docroot_targets_same_domain(self):
        command = ChangeWebDomainDocroot("u1", "site.lumicloude.my.id", "blog")
        self.assertEqual(command.args(), ("u1", "site.lumicloude.my.id", "site.lumicloude.my.id", "blog"))

    def test_docroot_reset_uses_default(self):
        command = ResetWebDomainDocroot("u1", "site.lumicloude.my.id")
        self.assertEqual(command.program, "v-change-web-domain-docroot")
        self.assertEqual(command.args(), ("u1", "site.lumicloude.my.id", "default"))

    def test_list_web_domains_returns_data(self):
        self.assertTrue(ListWebDomains.returns_data)
        self.assertEqual(ListWebDomains("u1").args(), ("u1", "json"))

    def test_letsencrypt_includes_alias_flag(self):
        self.assertEqual(AddLetsEncryptDomain("u1", "d.example").args(), ("u1", "d.example", "yes"))


class DatabaseAndDnsCommandTest(SimpleTestCase):
    def test_add_database_masks_password(self):
        command = AddDatabase("u1", "u1_blog", "u1_blog", "pw-123")
        self.assertEqual(command.args(), ("u1", "u1_blog", "u1_blog", "pw-123", "mysql", "localhost", "utf8mb4"))
        self.assertNotIn("pw-123", str(command))

    def test_list_databases_returns_data(self):
        self.assertTrue(ListDatabases.returns_data)
        self.assertFalse(AddDatabase.returns_data)

    def test_dns_record_blank_priority(self):
        command = AddDnsRecord("u1", "example.com", "www", "CNAME", "site.lumicloude.my.id")
        args = command.args()
        self.assertEqual(args[5], "")
        self.assertEqual(args[-1], "600")
