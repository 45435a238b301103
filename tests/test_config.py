"""
Snippetbox — Settings Unit Tests
=================================

What we test:
    ✅ The session cookie's Secure flag follows TLS unless set explicitly
    ✅ Startup validation of the session secret
    ✅ log_level normalization
"""

import logging

import pytest
from pydantic import ValidationError

from snippetbox.config import DEFAULT_SESSION_SECRET, Settings

LONG_SECRET = "s" * 40


class TestSessionCookieSecure:
    def test_plain_http_run_keeps_cookie_usable(self):
        settings = Settings(session_cookie_secure=None, tls_cert_file=None, tls_key_file=None)

        assert settings.tls_enabled is False
        assert settings.session_cookie_https_only is False

    def test_tls_run_marks_cookie_secure(self):
        settings = Settings(
            session_cookie_secure=None, tls_cert_file="cert.pem", tls_key_file="key.pem"
        )

        assert settings.session_cookie_https_only is True

    def test_explicit_setting_wins(self):
        settings = Settings(session_cookie_secure=True, tls_cert_file=None, tls_key_file=None)

        assert settings.session_cookie_https_only is True

    def test_secure_cookie_without_tls_warns(self, caplog):
        settings = Settings(
            session_secret_key=LONG_SECRET,
            session_cookie_secure=True,
            tls_cert_file=None,
            tls_key_file=None,
        )

        with caplog.at_level(logging.WARNING, logger="snippetbox.config"):
            settings.validate_required_for_production()

        assert any("SESSION_COOKIE_SECURE" in r.getMessage() for r in caplog.records)


class TestProductionValidation:
    def test_default_secret_is_rejected(self):
        settings = Settings(session_secret_key=DEFAULT_SESSION_SECRET)

        with pytest.raises(ValueError, match="SESSION_SECRET_KEY is not set"):
            settings.validate_required_for_production()

    def test_long_custom_secret_passes(self):
        Settings(session_secret_key=LONG_SECRET).validate_required_for_production()


class TestLogLevel:
    def test_normalized_to_upper_case(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")
