"""Verifier settings loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LEEWAY_DEFAULT = 0


def _split_csv(raw: str) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


class VerifierSettings(BaseSettings):
    """Claim expectations for verifiers configured from the environment."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    issuer: str = ""
    audience: str = ""
    leeway: int = Field(default=LEEWAY_DEFAULT, ge=0)
    ignore_issued_at: bool = False

    def get_issuer_list(self) -> list[str]:
        """Parse comma-separated accepted issuers."""
        return _split_csv(self.issuer)

    def get_audience_list(self) -> list[str]:
        """Parse comma-separated accepted audiences."""
        return _split_csv(self.audience)
