"""
Car Doctor Backend — Settings Tests
=====================================

What we test:
    ✅ cookie SameSite values are normalised and validated
    ✅ SameSite=None is refused unless the cookie is also Secure
    ✅ missing secrets are reported together
"""

import pytest
from pydantic import ValidationError

from car_doctor.config import Settings


class TestCookieSettings:

    def test_samesite_is_lowercased(self):
        assert Settings(cookie_samesite="Strict").cookie_samesite == "strict"

    def test_unknown_samesite_rejected(self):
        with pytest.raises(ValidationError):
            Settings(cookie_samesite="sometimes")

    def test_samesite_none_requires_secure(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(cookie_samesite="none", cookie_secure=False)
        assert "COOKIE_SECURE" in str(exc_info.value)

    def test_samesite_none_with_secure(self):
        config = Settings(cookie_samesite="None", cookie_secure=True)
        assert config.cookie_samesite == "none"
        assert config.cookie_secure is True


class TestProductionValidation:

    def test_reports_every_missing_secret(self):
        config = Settings(access_token_secret="", mongo_uri="")
        with pytest.raises(ValueError) as exc_info:
            config.validate_required_for_production()
        message = str(exc_info.value)
        assert "ACCESS_TOKEN_SECRET" in message
        assert "MONGO_URI" in message

    def test_passes_when_configured(self):
        config = Settings(access_token_secret="s" * 32, mongo_uri="mongodb://localhost:27017")
        config.validate_required_for_production()
