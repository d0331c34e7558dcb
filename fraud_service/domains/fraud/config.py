"""Fraud detection configuration with sensible defaults."""

import os
from dataclasses import dataclass, field


@dataclass
class ScoreThresholds:
    # Overall-score overrides applied after the rule loop
    medium_risk_threshold: float = 50.0
    high_risk_threshold: float = 100.0


@dataclass
class VelocityThresholds:
    lookback_hours: int = 24


@dataclass
class OriginThresholds:
    # Origin values treated as known-bad without a reputation lookup
    suspicious_origins: tuple[str, ...] = ("suspicious_ip",)


@dataclass
class FraudConfig:
    scoring: ScoreThresholds = field(default_factory=ScoreThresholds)
    velocity: VelocityThresholds = field(default_factory=VelocityThresholds)
    origin: OriginThresholds = field(default_factory=OriginThresholds)

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        if v := os.getenv("FRAUD_MEDIUM_RISK_THRESHOLD"):
            config.scoring.medium_risk_threshold = float(v)
        if v := os.getenv("FRAUD_HIGH_RISK_THRESHOLD"):
            config.scoring.high_risk_threshold = float(v)

        if v := os.getenv("FRAUD_VELOCITY_LOOKBACK_HOURS"):
            config.velocity.lookback_hours = int(v)

        if v := os.getenv("FRAUD_SUSPICIOUS_ORIGINS"):
            config.origin.suspicious_origins = tuple(
                item.strip() for item in v.split(",") if item.strip()
            )

        return config


# Module-level default instance
default_config = FraudConfig()
