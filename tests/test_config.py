"""Unit tests for Settings validation."""

import unittest

from pydantic import ValidationError

from tests.helpers import make_settings


class TestSettings(unittest.TestCase):
    """Settings defaults, secret handling and range checks."""

    def test_defaults(self) -> None:
        settings = make_settings()
        self.assertEqual(settings.JWT_ISSUER, "AccessibilityUsersAPI")
        self.assertEqual(settings.JWT_AUDIENCE, "AccessibilityClients")
        self.assertEqual(settings.JWT_EXPIRY_HOURS, 24)
        self.assertEqual(settings.SESSION_TOKEN_MINUTES, 1440)
        self.assertIsNone(settings.GATEWAY_SECRET)

    def test_blank_secrets_become_none(self) -> None:
        settings = make_settings(JWT_SECRET_KEY="  ", GATEWAY_SECRET="")
        self.assertIsNone(settings.JWT_SECRET_KEY)
        self.assertIsNone(settings.GATEWAY_SECRET)

    def test_secrets_are_masked(self) -> None:
        settings = make_settings(GATEWAY_SECRET="gw-shared-secret")
        self.assertNotIn("gw-shared-secret", repr(settings))
        self.assertEqual(settings.GATEWAY_SECRET.get_secret_value(), "gw-shared-secret")

    def test_database_url_scheme(self) -> None:
        self.assertEqual(
            make_settings(DATABASE_URL=" mysql+pymysql://u:p@db/users ").DATABASE_URL,
            "mysql+pymysql://u:p@db/users",
        )
        for url in ("", "mongodb://localhost/users"):
            with self.subTest(url=url):
                with self.assertRaises(ValidationError):
                    make_settings(DATABASE_URL=url)

    def test_ranges(self) -> None:
        for field, value in (
            ("JWT_EXPIRY_HOURS", 0),
            ("JWT_EXPIRY_HOURS", 721),
            ("SESSION_TOKEN_MINUTES", 0),
            ("SESSION_TOKEN_MINUTES", 43201),
            ("BCRYPT_ROUNDS", 3),
            ("BCRYPT_ROUNDS", 17),
            ("JWT_ISSUER", " "),
            ("APP_ENV", "staging"),
        ):
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    make_settings(**{field: value})


if __name__ == "__main__":
    unittest.main()
