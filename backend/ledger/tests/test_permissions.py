import json

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.test import TestCase
from django.urls import reverse

from ledger.permissions import assert_ledger_admin, is_ledger_admin


class PermissionTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="owner", password="password")

    def test_admin_requires_staff(self):
        self.assertFalse(is_ledger_admin(self.user))
        self.user.is_staff = True
        self.assertTrue(is_ledger_admin(self.user))

    def test_inactive_staff_is_not_admin(self):
        self.user.is_staff = True
        self.user.is_active = False
        self.assertFalse(is_ledger_admin(self.user))

    def test_anonymous_is_not_admin(self):
        self.assertFalse(is_ledger_admin(AnonymousUser()))

    def test_assert_raises(self):
        with self.assertRaises(PermissionDenied):
            assert_ledger_admin(self.user)


class UserAdministrationViewTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_user(
            username="root", password="password", is_staff=True
        )
        self.member = get_user_model().objects.create_user(
            username="member", password="password", email="member@example.com"
        )

    def test_regular_user_forbidden(self):
        self.client.login(username="member", password="password")
        response = self.client.get(reverse("ledger:user_list"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Administrator role required.")

    def test_list_users_with_keyword(self):
        self.client.login(username="root", password="password")
        response = self.client.get(reverse("ledger:user_list"), {"keyword": "member@"})
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["items"][0]["username"], "member")
        self.assertEqual(data["items"][0]["role"], "user")

    def test_promote_to_admin(self):
        self.client.login(username="root", password="password")
        response = self.client.put(
            reverse("ledger:user_set_role", kwargs={"pk": self.member.pk}),
            data=json.dumps({"role": "admin"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.member.refresh_from_db()
        self.assertTrue(self.member.is_staff)

    def test_unknown_role_rejected(self):
        self.client.login(username="root", password="password")
        response = self.client.put(
            reverse("ledger:user_set_role", kwargs={"pk": self.member.pk}),
            data=json.dumps({"role": "owner"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_deactivate_user(self):
        self.client.login(username="root", password="password")
        url = reverse("ledger:user_set_status", kwargs={"pk": self.member.pk}) + "?active=false"
        response = self.client.put(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "User deactivated.")
        self.member.refresh_from_db()
        self.assertFalse(self.member.is_active)

    def test_user_detail(self):
        self.client.login(username="root", password="password")
        response = self.client.get(reverse("ledger:user_detail", kwargs={"pk": self.member.pk}))
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["id"], self.member.pk)
        self.assertEqual(data["email"], "member@example.com")
        self.assertEqual(data["role"], "user")

    def test_user_detail_requires_admin(self):
        self.client.login(username="member", password="password")
        response = self.client.get(reverse("ledger:user_detail", kwargs={"pk": self.admin.pk}))
        self.assertEqual(response.status_code, 403)

    def test_user_detail_missing_is_404(self):
        self.client.login(username="root", password="password")
        response = self.client.get(reverse("ledger:user_detail", kwargs={"pk": 999999}))
        self.assertEqual(response.status_code, 404)

    def test_missing_user_is_404(self):
        self.client.login(username="root", password="password")
        url = reverse("ledger:user_set_status", kwargs={"pk": 999999}) + "?active=true"
        response = self.client.put(url)
        self.assertEqual(response.status_code, 404)
