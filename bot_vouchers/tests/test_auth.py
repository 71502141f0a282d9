# tests/test_auth.py
import json
import unittest
from unittest.mock import MagicMock

from bot_vouchers.core.api import ApiError
from bot_vouchers.core.auth import TOKEN_KEY, USER_KEY, AuthSession
from bot_vouchers.core.services import AuthService
from bot_vouchers.core.storage import LocalStore


class TestAuthSession(unittest.TestCase):
    def setUp(self):
        self.values = {}
        self.store = MagicMock(spec=LocalStore)
        self.store.get_item.side_effect = self.values.get
        self.store.set_item.side_effect = self.values.__setitem__
        self.store.remove_item.side_effect = lambda key: self.values.pop(key, None)
        self.service = MagicMock(spec=AuthService)
        self.session = AuthSession(self.service, self.store)

    def test_login_stores_token_and_user(self):
        self.service.login.return_value = {"token": "tok", "user": {"name": "Maria da Silva Souza"}}

        self.session.login("maria@x.com", "123")

        self.assertTrue(self.session.is_authenticated)
        self.assertEqual(self.values[TOKEN_KEY], "tok")
        self.assertEqual(json.loads(self.values[USER_KEY])["name"], "Maria da Silva Souza")
        self.assertEqual(self.session.display_name, "Maria da")

    def test_login_without_user_profile(self):
        self.service.login.return_value = {"token": "tok"}
        self.session.login("x@x.com", "1")
        self.assertTrue(self.session.is_authenticated)
        self.assertEqual(self.session.display_name, "Usuário")

    def test_login_failure_sets_error(self):
        self.service.login.side_effect = ApiError("Credenciais inválidas", 401)
        with self.assertRaises(ApiError):
            self.session.login("x@x.com", "errada")
        self.assertEqual(self.session.error, "Credenciais inválidas")
        self.assertFalse(self.session.is_authenticated)
        self.assertEqual(self.values, {})

    def test_load_restores_session(self):
        self.values.update({TOKEN_KEY: "tok", USER_KEY: '{"name": "João"}'})
        self.assertTrue(self.session.load().is_authenticated)
        self.assertEqual(self.session.display_name, "João")

    def test_load_with_broken_user_is_logged_out(self):
        self.values.update({TOKEN_KEY: "tok", USER_KEY: "{oops"})
        with self.assertLogs("bot_vouchers.core.auth", level="WARNING"):
            self.session.load()
        self.assertFalse(self.session.is_authenticated)

    def test_logout(self):
        self.values.update({TOKEN_KEY: "tok", USER_KEY: "{}"})
        self.session.load()
        self.session.logout()
        self.assertFalse(self.session.is_authenticated)
        self.assertEqual(self.values, {})


if __name__ == "__main__":
    unittest.main()
