# ===============================================================================
# 🧪 HESTIA GATEWAY TESTS
# ===============================================================================
"""
HTTP-level tests for HestiaGateway with the requests session mocked out:
form layout, credential handling, transport error translation and the
typed operations.
"""

from unittest.mock import patch

import requests
from django.test import SimpleTestCase, override_settings

from apps.provisioning.hestia_commands import ListWebDomains, SuspendUser
from apps.provisioning.hestia_gateway import (
    HestiaConfig,
    HestiaConfigurationError,
    HestiaGateway,
    HestiaResponseTooLargeError,
    HestiaTransportError,
)
from tests.fixtures.hestia import responses


def _http_response(body: str, status: int = 200, headers: dict | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body.encode()
    response._content_consumed = True
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


class HestiaConfigTest(SimpleTestCase):
    def test_api_url(self):
        config = HestiaConfig(host="panel.example.com", user="admin", password="pw", port=8083)
        self.assertEqual(config.api_url, "https://panel.example.com:8083/api/")

    def test_password_auth_wins(self):
        config = HestiaConfig(host="h", user="admin", password="pw", access_key_id="k", secret_key="s")
        self.assertEqual(config.auth_params(), {"user": "admin", "password": "pw"})

    def test_access_key_auth(self):
        config = HestiaConfig(host="h", user="admin", access_key_id="k", secret_key="s")
        self.assertEqual(config.auth_params(), {"user": "admin", "access_key": "k", "secret_key": "s"})
        self.assertTrue(config.has_credentials)

    def test_no_credentials(self):
        self.assertFalse(HestiaConfig(host="h", user="admin").has_credentials)

    @override_settings(HESTIA_HOST="panel.test", HESTIA_PORT=8443, HESTIA_ADMIN_USER="root", HESTIA_ADMIN_PASSWORD="x")
    def test_admin_from_settings(self):
        config = HestiaConfig.admin_from_settings()
        self.assertEqual((config.host, config.port, config.user, config.password), ("panel.test", 8443, "root", "x"))

    @override_settings(HESTIA_HOST="panel.test", HESTIA_PORT=8083)
    def test_for_panel_user(self):
        config = HestiaConfig.for_panel_user("custjohn1a2b", "customer-pw")
        self.assertEqual(config.user, "custjohn1a2b")
        self.assertEqual(config.password, "customer-pw")
        self.assertEqual(config.host, "panel.test")


class HestiaGatewayInvokeTest(SimpleTestCase):
    def setUp(self):
        self.gateway = HestiaGateway(HestiaConfig(host="panel.test", user="admin", password="pw", timeout=7))

    def test_form_layout_for_return_code_command(self):
        with patch.object(self.gateway._session, "post", return_value=_http_response(responses.OK)) as post:
            result = self.gateway.invoke(SuspendUser("custjohn1a2b"))

        self.assertTrue(result.is_ok())
        self.assertTrue(result.unwrap().success)
        kwargs = post.call_args.kwargs
        self.assertEqual(post.call_args.args[0], "https://panel.test:8083/api/")
        self.assertEqual(
            kwargs["data"],
            {
                "user": "admin",
                "password": "pw",
                "cmd": "v-suspend-user",
                "returncode": "yes",
                "arg1": "custjohn1a2b",
                "arg2": "no",
            },
        )
        self.assertEqual(kwargs["timeout"], 7)
        self.assertFalse(kwargs["verify"])

    def test_data_command_omits_returncode(self):
        body = responses.web_domains("a.lumicloude.my.id")
        with patch.object(self.gateway._session, "post", return_value=_http_response(body)) as post:
            result = self.gateway.invoke(ListWebDomains("u1"), timeout=3)

        self.assertNotIn("returncode", post.call_args.kwargs["data"])
        self.assertEqual(post.call_args.kwargs["timeout"], 3)
        self.assertIn("a.lumicloude.my.id", result.unwrap().data)

    def test_rejection_is_ok_with_failure(self):
        with patch.object(self.gateway._session, "post", return_value=_http_response(responses.E_EXISTS)):
            result = self.gateway.invoke(SuspendUser("u1"))

        self.assertTrue(result.is_ok())
        response = result.unwrap()
        self.assertFalse(response.success)
        self.assertEqual(response.return_code, 4)

    def test_http_forbidden(self):
        with patch.object(self.gateway._session, "post", return_value=_http_response("", status=403)):
            response = self.gateway.invoke(SuspendUser("u1")).unwrap()

        self.assertFalse(response.success)
        self.assertTrue(response.is_forbidden)

    def test_missing_credentials(self):
        gateway = HestiaGateway(HestiaConfig(host="panel.test", user="admin"))
        with patch.object(gateway._session, "post") as post:
            result = gateway.invoke(SuspendUser("u1"))

        post.assert_not_called()
        self.assertIsInstance(result.unwrap_err(), HestiaConfigurationError)

    def test_transport_errors_are_translated(self):
        for exc in (
            requests.exceptions.ConnectTimeout(),
            requests.exceptions.ReadTimeout(),
            requests.exceptions.SSLError("bad cert"),
            requests.exceptions.ConnectionError("refused"),
        ):
            with self.subTest(exc=type(exc).__name__), patch.object(self.gateway._session, "post", side_effect=exc):
                result = self.gateway.invoke(SuspendUser("u1"))
                self.assertIsInstance(result.unwrap_err(), HestiaTransportError)

    def test_oversized_response(self):
        oversized = _http_response(responses.OK, headers={"content-length": str(20 * 1024 * 1024)})
        with patch.object(self.gateway._session, "post", return_value=oversized):
            result = self.gateway.invoke(SuspendUser("u1"))

        error = result.unwrap_err()
        self.assertIsInstance(error, HestiaResponseTooLargeError)
        self.assertNotIsInstance(error, HestiaTransportError)
        self.assertIn("too large", str(error))


class HestiaGatewayTypedOperationsTest(SimpleTestCase):
    def setUp(self):
        self.gateway = HestiaGateway(HestiaConfig(host="panel.test", user="admin", password="pw"))

    def test_typed_operations_build_commands(self):
        with patch.object(self.gateway, "invoke") as invoke:
            self.gateway.suspend_user("u1")
            self.gateway.add_web_domain("u1", "d.example", aliases=["www.d.example"])
            self.gateway.change_php_version("u1", "d.example", "7.4")

        commands = [call.args[0] for call in invoke.call_args_list]
        self.assertEqual([c.program for c in commands],
                         ["v-suspend-user", "v-add-web-domain", "v-change-web-domain-backend-tpl"])
        self.assertEqual(commands[1].aliases, ("www.d.example",))
        self.assertEqual(commands[2].args()[-1], "PHP-7_4")

    def test_connection_check(self):
        with patch.object(self.gateway._session, "post", return_value=_http_response('{"sysinfo": {"HOSTNAME": "panel"}}')):
            result = self.gateway.test_connection()

        self.assertTrue(result.is_ok())
        self.assertEqual(result.unwrap()["host"], "panel.test")
