# ===============================================================================
# 🧪 CUSTOMER API TESTS - ONBOARDING, SUSPENSION & PANEL LINKING
# ===============================================================================

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from apps.audit.models import ActivityLog
from apps.customers.models import Customer
from apps.provisioning.models import Website
from tests.factories import create_admin, create_customer, create_customer_user, create_website
from tests.mocks.hestia_mock import HestiaMockMixin


class CustomerAPITestCase(HestiaMockMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.admin = create_admin()
        self.client.force_authenticate(user=self.admin)


class CustomerListCreateAPITest(CustomerAPITestCase):
    def test_list_customers(self):
        customer = create_customer()
        create_website(customer)

        response = self.client.get('/api/customers/')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['success'])
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['website_count'], 1)
        self.assertNotIn('_hestia_password', response.data['data'][0])

    def test_list_requires_admin(self):
        self.client.force_authenticate(user=create_customer_user())
        self.assertEqual(self.client.get('/api/customers/').status_code, 403)

    def test_list_requires_authentication(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get('/api/customers/').status_code, 403)

    def test_create_customer(self):
        response = self.client.post(
            '/api/customers/',
            {'name': 'Jane Smith', 'email': 'Jane@Example.com', 'package_id': 'business', 'need_database': True},
            format='json',
        )

        self.assertEqual(response.status_code, 201)
        data = response.data['data']
        customer = Customer.objects.get(pk=data['customer_id'])
        self.assertEqual(customer.email, 'jane@example.com')
        self.assertEqual(customer.created_by, self.admin)
        self.assertTrue(data['hestia_password'])
        self.assertIsNotNone(data['database'])
        self.assertIn('Jane Smith', response.data['message'])
        self.assertIsNotNone(self.mock_gateway.get_user_state(customer.hestia_username))

    def test_create_rejects_unknown_package(self):
        response = self.client.post(
            '/api/customers/', {'name': 'Jane', 'email': 'jane@example.com', 'package_id': 'gold'}, format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('package_id', response.data['details'])
        self.assertEqual(self.mock_gateway.call_count, 0)

    def test_create_rejects_duplicate_email(self):
        create_customer(email='jane@example.com')

        response = self.client.post('/api/customers/', {'name': 'Jane', 'email': 'jane@example.com'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('email', response.data['details'])

    def test_create_panel_failure(self):
        self.mock_gateway.fail_commands = {'v-add-user': 4}

        response = self.client.post('/api/customers/', {'name': 'Jane', 'email': 'jane@example.com'}, format='json')

        self.assertEqual(response.status_code, 502)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['code'], 'remote_operation_failed')
        self.assertFalse(Customer.objects.exists())


class CustomerDetailAPITest(CustomerAPITestCase):
    def test_detail(self):
        customer = create_customer(email='jane@example.com')

        response = self.client.get(f'/api/customers/{customer.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['email'], 'jane@example.com')

    def test_detail_not_found(self):
        self.assertEqual(self.client.get('/api/customers/999/').status_code, 404)

    def test_delete(self):
        customer = create_customer(hestia_username='custjane0001')

        response = self.client.delete(f'/api/customers/{customer.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Customer.objects.exists())
        self.assertEqual(self.mock_gateway.programs, ['v-delete-user'])

    def test_delete_not_found(self):
        response = self.client.delete('/api/customers/999/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['code'], 'not_found')

    def test_patch(self):
        customer = create_customer(email='jane@example.com', package_id='starter')

        response = self.client.patch(
            f'/api/customers/{customer.pk}/', {'phone': '+628123', 'package_id': 'business'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['phone'], '+628123')
        customer.refresh_from_db()
        self.assertEqual(customer.package_id, 'business')
        self.assertEqual(customer.monthly_price, Decimal('75000'))
        self.assertEqual(self.mock_gateway.call_count, 0)
        entry = ActivityLog.objects.get(action='customer.updated')
        self.assertEqual(entry.metadata['fields'], ['monthly_price', 'package_id', 'phone'])

    def test_put_is_patch(self):
        customer = create_customer()

        response = self.client.put(f'/api/customers/{customer.pk}/', {'company': 'Acme'}, format='json')

        self.assertEqual(response.status_code, 200)
        customer.refresh_from_db()
        self.assertEqual(customer.company, 'Acme')

    def test_patch_ignores_status_and_email(self):
        customer = create_customer(email='jane@example.com')

        response = self.client.patch(
            f'/api/customers/{customer.pk}/', {'status': 'SUSPENDED', 'email': 'x@example.com'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        customer.refresh_from_db()
        self.assertEqual(customer.status, Customer.STATUS_ACTIVE)
        self.assertEqual(customer.email, 'jane@example.com')
        self.assertFalse(ActivityLog.objects.filter(action='customer.updated').exists())

    def test_patch_invalid_package(self):
        customer = create_customer()

        response = self.client.patch(f'/api/customers/{customer.pk}/', {'package_id': 'gold'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('package_id', response.data['details'])

    def test_patch_not_found(self):
        self.assertEqual(self.client.patch('/api/customers/999/', {'name': 'Nobody'}, format='json').status_code, 404)

    def test_patch_requires_admin(self):
        customer = create_customer()
        self.client.force_authenticate(user=create_customer_user())

        response = self.client.patch(f'/api/customers/{customer.pk}/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, 403)


class CustomerSuspensionAPITest(CustomerAPITestCase):
    def setUp(self):
        super().setUp()
        self.customer = create_customer(hestia_username='custjohn1a2b')
        self.website = create_website(self.customer, subdomain='john12345.lumicloude.my.id')
        self.mock_gateway.seed_user('custjohn1a2b', domains=['john12345.lumicloude.my.id'])
        self.url = f'/api/customers/{self.customer.pk}/suspend/'

    def test_suspend(self):
        response = self.client.post(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['status'], Customer.STATUS_SUSPENDED)
        self.assertFalse(response.data['data']['partial'])
        self.assertTrue(self.mock_gateway.get_user_state('custjohn1a2b').suspended)
        self.website.refresh_from_db()
        self.assertEqual(self.website.status, Website.STATUS_SUSPENDED)
        self.assertTrue(ActivityLog.objects.filter(action='customer.suspended', user=self.admin).exists())

    def test_suspend_with_domain_failure_is_partial(self):
        self.mock_gateway.fail_domains = {'john12345.lumicloude.my.id'}

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['data']['partial'])
        self.assertIn('could not be updated', response.data['message'])

    def test_unsuspend(self):
        self.client.post(self.url)

        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['status'], Customer.STATUS_ACTIVE)
        self.assertFalse(self.mock_gateway.get_user_state('custjohn1a2b').suspended)

    def test_panel_rejection_keeps_status(self):
        self.mock_gateway.fail_commands = {'v-suspend-user': 3}

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, 502)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.status, Customer.STATUS_ACTIVE)

    def test_panel_forbidden(self):
        self.mock_gateway.fail_commands = {'v-suspend-user': 10}

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, 403)
        self.assertTrue(response.data['details']['forbidden'])

    def test_requires_admin(self):
        self.client.force_authenticate(user=create_customer_user(email='other@example.com'))

        self.assertEqual(self.client.post(self.url).status_code, 403)
        self.assertEqual(self.mock_gateway.call_count, 0)


class LinkPanelAPITest(HestiaMockMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.user = create_customer_user(email='john@example.com')
        self.customer = create_customer(email='john@example.com', hestia_username='custjohn1a2b')
        self.client.force_authenticate(user=self.user)

    def test_link(self):
        response = self.client.post('/api/customers/link-panel/', {'password': 'my-panel-pw'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['data']['hestia_username'], 'custjohn1a2b')
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.get_hestia_password(), 'my-panel-pw')
        self.assertEqual(self.customer.user, self.user)

    def test_bad_credentials(self):
        self.mock_gateway.fail_commands = {'v-list-web-domains': 9}

        response = self.client.post('/api/customers/link-panel/', {'password': 'wrong'}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_forbidden(self):
        self.mock_gateway.fail_commands = {'v-list-web-domains': 10}

        response = self.client.post('/api/customers/link-panel/', {'password': 'pw'}, format='json')

        self.assertEqual(response.status_code, 403)
        self.assertIn('whitelist', response.data['error'])

    def test_password_required(self):
        response = self.client.post('/api/customers/link-panel/', {}, format='json')
        self.assertEqual(response.status_code, 400)
