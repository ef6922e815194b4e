# =====================================
# 🧪 HESTIA RESPONSE PARSER TESTS
# ===============================================================================
"""
Tests for HestiaResponseParser covering return codes, JSON listings, plain
tables, HTTP-level failures and forbidden detection.
"""

from django.test import SimpleTestCase

from apps.provisioning.hestia_commands import ListDatabases, ListUsers, ListWebDomains, SuspendUser
from apps.provisioning.hestia_gateway import FORBIDDEN_GUIDANCE, HestiaResponse, HestiaResponseParser
from tests.fixtures.hestia import responses


def _response(**overrides):
    values = {
        "success": False,
        "data": None,
        "raw_output": "",
        "error": "",
        "return_code": None,
        "http_status": 200,
        "command": "v-suspend-user",
        "execution_time": 0.1,
    }
    values.update(overrides)
    return HestiaResponse(**values)


class ReturnCodeParsingTest(SimpleTestCase):
    def test_zero_is_success(self):
        parsed = HestiaResponseParser.parse_response(responses.OK, SuspendUser("u1"), 200)
        self.assertTrue(parsed["success"])
        self.assertEqual(parsed["return_code"], 0)

    def test_nonzero_names_the_code(self):
        parsed = HestiaResponseParser.parse_response(responses.E_NOTEXIST, SuspendUser("u1"), 200)
        self.assertFalse(parsed["success"])
        self.assertEqual(parsed["return_code"], 3)
        self.assertIn("E_NOTEXIST", parsed["error"])
        self.assertIn("v-suspend-user", parsed["error"])

    def test_legacy_error_text(self):
        parsed = HestiaResponseParser.parse_response(responses.legacy_error(), SuspendUser("u1"), 200)
        self.assertFalse(parsed["success"])
        self.assertIn("doesn't exist", parsed["error"])

    def test_http_error_status(self):
        parsed = HestiaResponseParser.parse_response("", SuspendUser("u1"), 401)
        self.assertFalse(parsed["success"])
        self.assertEqual(parsed["error"], "HTTP 401")


class DataParsingTest(SimpleTestCase):
    def test_json_listing(self):
        body = responses.web_domains("a.lumicloude.my.id", "b.lumicloude.my.id")
        parsed = HestiaResponseParser.parse_response(body, ListWebDomains("u1"), 200)
        self.assertTrue(parsed["success"])
        self.assertEqual(set(parsed["data"]), {"a.lumicloude.my.id", "b.lumicloude.my.id"})

    def test_empty_listing(self):
        parsed = HestiaResponseParser.parse_response("", ListDatabases("u1"), 200)
        self.assertTrue(parsed["success"])
        self.assertEqual(parsed["data"], {})

    def test_return_code_on_listing(self):
        parsed = HestiaResponseParser.parse_response(responses.E_FORBIDDEN, ListWebDomains("u1"), 200)
        self.assertFalse(parsed["success"])
        self.assertEqual(parsed["return_code"], 10)

    def test_plain_table(self):
        parsed = HestiaResponseParser.parse_response(responses.users_table(), ListUsers(), 200)
        self.assertTrue(parsed["success"])
        rows = parsed["data"]
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1]["USER"], "custjohn1a2b")
        self.assertEqual(rows[1]["SUSPENDED"], "yes")


class ForbiddenDetectionTest(SimpleTestCase):
    def test_forbidden_return_code(self):
        response = _response(return_code=10, error="v-list-web-domains failed with return code 10 (E_FORBIDEN)")
        self.assertTrue(response.is_forbidden)
        self.assertEqual(response.error_message, FORBIDDEN_GUIDANCE)

    def test_http_401(self):
        self.assertTrue(_response(http_status=401, error="HTTP 401").is_forbidden)

    def test_error_text_alone_is_not_forbidden(self):
        for text in ("Error: web domain shop401.example.com doesn't exist", "Error: forbidden characters in name"):
            with self.subTest(text=text):
                response = _response(return_code=3, error=text)
                self.assertFalse(response.is_forbidden)
                self.assertEqual(response.error_message, text)

    def test_ordinary_failure(self):
        response = _response(return_code=3, error="E_NOTEXIST")
        self.assertFalse(response.is_forbidden)
        self.assertEqual(response.error_message, "E_NOTEXIST")
