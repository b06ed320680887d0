"""Tests for environment-driven verifier settings."""

import pytest
from pydantic import ValidationError

from jwtkit.core.settings import VerifierSettings


class TestVerifierSettings:
    """Tests for VerifierSettings."""

    def test_defaults(self) -> None:
        settings = VerifierSettings()
        assert settings.get_issuer_list() == []
        assert settings.get_audience_list() == []
        assert settings.leeway == 0
        assert settings.ignore_issued_at is False

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_ISSUER", "https://issuer.example")
        monkeypatch.setenv("JWT_AUDIENCE", "api, web ,,")
        monkeypatch.setenv("JWT_LEEWAY", "30")
        settings = VerifierSettings()
        assert settings.get_issuer_list() == ["https://issuer.example"]
        assert settings.get_audience_list() == ["api", "web"]
        assert settings.leeway == 30

    def test_negative_leeway_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VerifierSettings(leeway=-1)
