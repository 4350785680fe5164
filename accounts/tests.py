from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User


class AccountsTest(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_signup_as_organizer(self):
        resp = self.client.post('/api/v1/auth/signup/', {
            'username': 'grace',
            'email': 'grace@example.com',
            'password': 'password123',
            'role': 'organizer',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertIn('access_token', resp.data)
        user = User.objects.get(username='grace')
        self.assertTrue(user.is_organizer)
        self.assertEqual(user.role, 'organizer')

    def test_signup_duplicate_email(self):
        User.objects.create_user(username='ada', email='ada@example.com', password='password123')
        resp = self.client.post('/api/v1/auth/signup/', {
            'username': 'ada2',
            'email': 'ADA@example.com',
            'password': 'password123',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('email', resp.data)

    def test_login_and_me(self):
        User.objects.create_user(username='ada', email='ada@example.com', password='password123')
        resp = self.client.post('/api/v1/auth/login/', {'username': 'ada', 'password': 'password123'}, format='json')
        self.assertEqual(resp.status_code, 200)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access_token']}")
        resp = self.client.get('/api/v1/auth/me/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['user']['role'], 'participant')

    def test_login_with_wrong_password(self):
        User.objects.create_user(username='ada', email='ada@example.com', password='password123')
        resp = self.client.post('/api/v1/auth/login/', {'username': 'ada', 'password': 'nope'}, format='json')
        self.assertEqual(resp.status_code, 401)

    def test_me_requires_token(self):
        self.assertEqual(self.client.get('/api/v1/auth/me/').status_code, 401)
