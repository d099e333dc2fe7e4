from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()

PASSWORD = "Repair-Shop-2024!"


class AuthApiTests(TestCase):
    """
    GUARANTEES:
    - JWT pair issued for valid email/password
    - /me/ reflects the bearer
    - Only admins register staff
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password=PASSWORD, role="admin"
        )
        self.technician = User.objects.create_user(
            email="tech@example.com", password=PASSWORD
        )

    def test_token_and_me(self):
        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "tech@example.com", "password": PASSWORD},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.content)
        access = res.json()["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["email"], "tech@example.com")
        self.assertEqual(res.json()["role"], "technician")

    def test_wrong_password_rejected(self):
        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "tech@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(res.status_code, 401)

    def test_register_requires_admin(self):
        body = {
            "email": "cashier@example.com",
            "password": PASSWORD,
            "role": "cashier",
        }

        self.client.force_authenticate(user=self.technician)
        self.assertEqual(
            self.client.post("/api/auth/register/", body, format="json").status_code,
            403,
        )

        self.client.force_authenticate(user=self.admin)
        res = self.client.post("/api/auth/register/", body, format="json")
        self.assertEqual(res.status_code, 201, res.content)
        self.assertEqual(res.json()["role"], "cashier")
        self.assertTrue(User.objects.filter(email="cashier@example.com").exists())

    def test_username_derived_from_email(self):
        self.assertEqual(self.technician.username, "tech")
        twin = User.objects.create_user(email="tech@other.example", password=PASSWORD)
        self.assertEqual(twin.username, "tech2")
