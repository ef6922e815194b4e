# ===============================================================================
# 🧪 LIFECYCLE STEP POLICY TESTS
# ===============================================================================
"""
run_step semantics: BLOCKING failures abort with a LifecycleError,
BEST_EFFORT failures are recorded and the workflow carries on.
"""

from unittest.mock import patch

from django.test import SimpleTestCase

from apps.common.exceptions import RemoteOperationError, RemoteTransportError
from apps.common.types import Ok
from apps.provisioning.hestia_commands import AddLetsEncryptDomain, ListWebDomains, SuspendUser
from apps.provisioning.hestia_gateway import (
    FORBIDDEN_GUIDANCE,
    TRANSPORT_GUIDANCE,
    HestiaCancelledError,
    HestiaConfigurationError,
    HestiaResponse,
    HestiaResponseTooLargeError,
)
from apps.provisioning.lifecycle import RESPONSE_TOO_LARGE_MESSAGE, StepLog, StepPolicy, run_step, to_lifecycle_error
from tests.mocks.hestia_mock import MockHestiaGateway


class RunStepTest(SimpleTestCase):
    def test_success_is_recorded(self):
        log = StepLog()
        result = run_step(MockHestiaGateway(), SuspendUser("u1"), StepPolicy.BLOCKING, log)

        outcome = result.unwrap()
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.command, "v-suspend-user")
        self.assertEqual(log.to_list(), [{"command": "v-suspend-user", "success": True, "error": None}])

    def test_blocking_rejection_returns_err(self):
        gateway = MockHestiaGateway(fail_commands={"v-suspend-user": 3})
        log = StepLog()

        result = run_step(gateway, SuspendUser("u1"), StepPolicy.BLOCKING, log)

        error = result.unwrap_err()
        self.assertIsInstance(error, RemoteOperationError)
        self.assertEqual(error.return_code, 3)
        self.assertEqual(error.http_status, 502)
        self.assertIn("E_NOTEXIST", error.message)
        self.assertEqual(len(log.failed), 1)

    def test_best_effort_rejection_returns_ok(self):
        gateway = MockHestiaGateway(fail_commands={"v-add-letsencrypt-domain": 2})

        result = run_step(gateway, AddLetsEncryptDomain("u1", "d.example"), StepPolicy.BEST_EFFORT)

        outcome = result.unwrap()
        self.assertFalse(outcome.success)
        self.assertIn("E_INVALID", outcome.error)
        self.assertIsNotNone(outcome.response)

    def test_forbidden_rejection(self):
        gateway = MockHestiaGateway(fail_commands={"v-list-web-domains": 10})

        error = run_step(gateway, ListWebDomains("u1"), StepPolicy.BLOCKING).unwrap_err()

        self.assertTrue(error.forbidden)
        self.assertEqual(error.http_status, 403)
        self.assertEqual(error.details["hint"], FORBIDDEN_GUIDANCE)

    def test_error_text_mentioning_401_is_ordinary_failure(self):
        gateway = MockHestiaGateway()
        rejection = HestiaResponse(
            success=False,
            data=None,
            raw_output="",
            error="Error: web domain shop401.example.com doesn't exist",
            return_code=3,
            http_status=200,
            command="v-suspend-web-domain",
            execution_time=0.1,
        )

        with patch.object(gateway, "invoke", return_value=Ok(rejection)):
            error = run_step(gateway, SuspendUser("u1"), StepPolicy.BLOCKING).unwrap_err()

        self.assertFalse(error.forbidden)
        self.assertEqual(error.http_status, 502)
        self.assertNotIn("hint", error.details)
        self.assertIn("shop401", error.message)

    def test_transport_failure(self):
        gateway = MockHestiaGateway(transport_failures={"v-suspend-user": 1})

        error = run_step(gateway, SuspendUser("u1"), StepPolicy.BLOCKING).unwrap_err()

        self.assertIsInstance(error, RemoteTransportError)
        self.assertEqual(error.http_status, 502)
        self.assertEqual(error.message, TRANSPORT_GUIDANCE)


class ErrorTranslationTest(SimpleTestCase):
    def test_configuration_error(self):
        error = to_lifecycle_error(HestiaConfigurationError("No Hestia credentials configured for admin"))
        self.assertIsInstance(error, RemoteOperationError)
        self.assertIn("No Hestia credentials", error.message)

    def test_oversized_response(self):
        error = to_lifecycle_error(HestiaResponseTooLargeError("Response exceeds size limit: 10MB"))
        self.assertIsInstance(error, RemoteOperationError)
        self.assertEqual(error.http_status, 502)
        self.assertTrue(error.message.startswith(RESPONSE_TOO_LARGE_MESSAGE))
        self.assertNotEqual(error.message, TRANSPORT_GUIDANCE)

    def test_cancelled(self):
        error = to_lifecycle_error(HestiaCancelledError("v-suspend-user cancelled: shutdown"))
        self.assertIsInstance(error, RemoteTransportError)
        self.assertIn("cancelled", error.message)

    def test_error_payload(self):
        payload = RemoteOperationError("boom", return_code=4).to_dict()
        self.assertEqual(payload["error"], "boom")
        self.assertEqual(payload["code"], "remote_operation_failed")
        self.assertEqual(payload["details"], {"return_code": 4, "forbidden": False})
