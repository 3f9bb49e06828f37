from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import AuthError
from core.factories import make_distributor, make_user
from distributors.models import Distributor
from .context import SYSTEM, resolve_auth_context
from .models import User


class AuthContextTest(TestCase):
    def test_context_from_user(self):
        distributor = make_distributor()
        user = make_user('gokul', role='distributor', distributor=distributor)
        user.first_name = 'Gokul'
        user.last_name = 'Rao'
        actor = resolve_auth_context(user)
        self.assertEqual(actor.role, 'distributor')
        self.assertEqual(actor.distributor_id, distributor.pk)
        self.assertEqual(actor.audit(), {
            'updated_by_role': 'distributor', 'updated_by_id': user.pk, 'updated_by_name': 'Gokul Rao',
        })
        self.assertFalse(actor.is_admin)
        self.assertEqual(SYSTEM.audit()['updated_by_role'], 'system')

    def test_anonymous_has_no_context(self):
        with self.assertRaises(AuthError):
            resolve_auth_context(None)


class LoginTest(APITestCase):
    def setUp(self):
        self.user = make_user('admin', password='secret-pass-1')

    def test_login_token_carries_role(self):
        response = self.client.post('/api/accounts/login/', {
            'username': 'admin', 'password': 'secret-pass-1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AccessToken(response.data['access'])['role'], 'admin')
        self.assertEqual(response.data['user']['username'], 'admin')

    def test_login_with_wrong_role(self):
        response = self.client.post('/api/accounts/login/', {
            'username': 'admin', 'password': 'secret-pass-1', 'role': 'distributor',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bad_password(self):
        response = self.client.post('/api/accounts/login/', {
            'username': 'admin', 'password': 'nope',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_requests_need_a_token(self):
        self.assertEqual(self.client.get('/api/accounts/me/').status_code, status.HTTP_401_UNAUTHORIZED)


class UserManagementTest(APITestCase):
    def setUp(self):
        self.admin = make_user('admin')
        self.staff = make_user('staff', role='staff')
        self.distributor = make_distributor()

    def test_api_root_lists_user_endpoint(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/accounts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['users'].endswith('/api/accounts/users/'))

    def test_admin_creates_staff(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/accounts/users/', {
            'username': 'ravi', 'password': 'another-pass-9', 'role': 'staff',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(User.objects.get(username='ravi').check_password('another-pass-9'))

    def test_distributor_login_needs_distributor(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/accounts/users/', {
            'username': 'dist', 'password': 'another-pass-9', 'role': 'distributor',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_cannot_manage_users(self):
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.get('/api/accounts/users/').status_code, status.HTTP_403_FORBIDDEN)

    def test_register_distributor(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/accounts/register-distributor/', {
            'username': 'nandini', 'password': 'another-pass-9',
            'distributor_name': 'Nandini', 'company_name': 'KMF',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username='nandini')
        self.assertEqual(user.role, User.DISTRIBUTOR)
        self.assertEqual(user.distributor.status, Distributor.ACTIVE)

    def test_change_password(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/accounts/me/password/', {
            'current_password': 'secret-pass-1', 'new_password': 'brand-new-pass',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.staff.refresh_from_db()
        self.assertTrue(self.staff.check_password('brand-new-pass'))
