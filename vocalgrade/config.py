"""Scoring configuration."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ScoringOptions(BaseModel):
    """Validated scoring options shared by every scorer of one take."""

    # Extra confidence gate on top of upstream voicing (0 disables it)
    confidence_min: float = Field(0.0, ge=0.0, le=1.0)
    # Full pitch credit inside this many cents
    cents_ok: float = Field(50.0, gt=0.0, lt=240.0)
    # Ignored head of each note
    onset_grace_ms: float = Field(120.0, ge=0.0)
    # Largest tap/expected distance that can still match
    max_align_ms: float = Field(250.0, gt=0.0)
    # Full rhythm credit inside this band
    good_align_ms: float = Field(120.0, ge=0.0)

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def onset_grace_sec(self) -> float:
        return self.onset_grace_ms / 1000.0


class Settings(BaseSettings):
    """Scoring defaults with env var overrides."""

    confidence_min: float = 0.0
    cents_ok: float = 50.0
    onset_grace_ms: float = 120.0
    max_align_ms: float = 250.0
    good_align_ms: float = 120.0

    model_config = {"env_prefix": "VOCALGRADE_"}

    def scoring_options(self) -> ScoringOptions:
        return ScoringOptions(
            confidence_min=self.confidence_min,
            cents_ok=self.cents_ok,
            onset_grace_ms=self.onset_grace_ms,
            max_align_ms=self.max_align_ms,
            good_align_ms=self.good_align_ms,
        )


settings = Settings()
