# ===============================================================================
# 🧪 HESTIA RETRY & CANCELLATION TESTS
# ===============================================================================
"""
ResilientHestiaGateway retries transport failures only, honours cancellation
between attempts and respects a whole-call deadline.
"""

from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from apps.provisioning.hestia_commands import AddUser, SuspendUser
from apps.provisioning.hestia_gateway import HestiaCancelledError, HestiaTransportError
from apps.provisioning.hestia_resilience import CancellationToken, ResilientHestiaGateway, RetryPolicy
from tests.mocks.hestia_mock import MockHestiaGateway


def _resilient(mock: MockHestiaGateway, token: CancellationToken | None = None, **policy) -> ResilientHestiaGateway:
    sleeps: list[float] = []
    gateway = ResilientHestiaGateway(
        mock,
        policy=RetryPolicy(**{"max_attempts": 3, "backoff_seconds": 0.5, **policy}),
        token=token,
        sleep=sleeps.append,
    )
    gateway.sleeps = sleeps
    return gateway


class RetryPolicyTest(SimpleTestCase):
    def test_exponential_delay(self):
        policy = RetryPolicy(backoff_seconds=0.5)
        self.assertEqual([policy.delay_for(n) for n in range(3)], [0.5, 1.0, 2.0])

    @override_settings(HESTIA_MAX_RETRIES=5, HESTIA_RETRY_BACKOFF_SECONDS=0.0, HESTIA_CALL_DEADLINE_SECONDS=None)
    def test_from_settings(self):
        policy = RetryPolicy.from_settings()
        self.assertEqual(policy.max_attempts, 5)
        self.assertEqual(policy.backoff_seconds, 0.0)
        self.assertIsNone(policy.deadline_seconds)


class ResilientGatewayTest(SimpleTestCase):
    def test_transport_failure_then_success(self):
        mock = MockHestiaGateway(transport_failures={"v-suspend-user": 2})
        gateway = _resilient(mock)

        result = gateway.invoke(SuspendUser("u1"))

        self.assertTrue(result.unwrap().success)
        self.assertEqual(len(mock.get_calls("v-suspend-user")), 3)
        self.assertEqual(gateway.sleeps, [0.5, 1.0])

    def test_gives_up_after_max_attempts(self):
        mock = MockHestiaGateway(transport_failures={"v-suspend-user": 10})
        gateway = _resilient(mock)

        error = gateway.invoke(SuspendUser("u1")).unwrap_err()

        self.assertIsInstance(error, HestiaTransportError)
        self.assertIn("after 3 attempt(s)", str(error))
        self.assertEqual(len(mock.get_calls("v-suspend-user")), 3)

    def test_application_failure_is_not_retried(self):
        mock = MockHestiaGateway()
        mock.seed_user("u1")
        gateway = _resilient(mock)

        response = gateway.invoke(AddUser("u1", "pw", "u1@example.com")).unwrap()

        self.assertFalse(response.success)
        self.assertEqual(response.return_code, 4)
        self.assertEqual(len(mock.get_calls("v-add-user")), 1)
        self.assertEqual(gateway.sleeps, [])

    def test_cancelled_token_stops_dispatch(self):
        token = CancellationToken()
        token.cancel("shutdown")
        mock = MockHestiaGateway()
        gateway = _resilient(mock, token=token)

        error = gateway.invoke(SuspendUser("u1")).unwrap_err()

        self.assertIsInstance(error, HestiaCancelledError)
        self.assertIn("shutdown", str(error))
        self.assertEqual(mock.call_count, 0)

    def test_cancel_during_backoff(self):
        token = CancellationToken()
        mock = MockHestiaGateway(transport_failures={"v-suspend-user": 5})
        gateway = ResilientHestiaGateway(
            mock, policy=RetryPolicy(max_attempts=3), token=token, sleep=lambda _: token.cancel("stop")
        )

        error = gateway.invoke(SuspendUser("u1")).unwrap_err()

        self.assertIsInstance(error, HestiaCancelledError)
        self.assertEqual(len(mock.get_calls("v-suspend-user")), 1)

    def test_exhausted_deadline(self):
        mock = MockHestiaGateway()
        gateway = _resilient(mock, deadline_seconds=0.5)

        error = gateway.invoke(SuspendUser("u1")).unwrap_err()

        self.assertIsInstance(error, HestiaTransportError)
        self.assertIn("deadline", str(error))
        self.assertEqual(mock.call_count, 0)

    def test_deadline_after_transport_failure_reports_real_attempts(self):
        mock = MockHestiaGateway(transport_failures={"v-suspend-user": 5})
        gateway = _resilient(mock, deadline_seconds=30)

        with patch("apps.provisioning.hestia_resilience.time") as clock:
            clock.monotonic.side_effect = [0.0, 0.0, 100.0]
            error = gateway.invoke(SuspendUser("u1")).unwrap_err()

        self.assertIsInstance(error, HestiaTransportError)
        self.assertIn("deadline after 1 attempt(s)", str(error))
        self.assertIn("Connection error", str(error))
        self.assertNotIn("after 3", str(error))
        self.assertEqual(len(mock.get_calls("v-suspend-user")), 1)

    def test_typed_operations_go_through_retries(self):
        mock = MockHestiaGateway(transport_failures={"v-unsuspend-user": 1})
        gateway = _resilient(mock)

        result = gateway.unsuspend_user("u1")

        self.assertTrue(result.unwrap().success)
        self.assertEqual(len(mock.get_calls("v-unsuspend-user")), 2)

    def test_unknown_attribute(self):
        with self.assertRaises(AttributeError):
            _resilient(MockHestiaGateway()).not_an_operation  # noqa: B018


class CancellationTokenTest(SimpleTestCase):
    def test_cancel(self):
        token = CancellationToken()
        self.assertFalse(token.is_cancelled)
        token.cancel("user request")
        self.assertTrue(token.is_cancelled)
        self.assertEqual(token.reason, "user request")
        self.assertTrue(token.wait(0))
