"""
Configuration for the fantasy odds engine.

Every tunable constant of the market pipeline lives here so that a league can
retune its lines without touching code.

Environment override example:
    ENGINE__DEFAULT_VIG=0.05
    ENGINE__PICKEM_GAP_THRESHOLD=4.0
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__ as APP_VERSION


class EngineConfig(BaseSettings):
    """Engine configuration - market defaults, spread model weights and bounds."""

    # ─────────────────────────────────────────────────────────────────────────
    # MARKET DEFAULTS
    # ─────────────────────────────────────────────────────────────────────────

    default_vig: float = Field(
        default=0.045,
        description="Book margin applied to moneylines as a (1 + vig/2) multiplier."
    )
    default_week: int = Field(
        default=3,
        description="Week number assumed when the caller does not supply one."
    )
    default_average_score: float = Field(
        default=120.0,
        description="Average score synthesized for teams missing from the stats map."
    )
    include_prop_bets: bool = Field(
        default=True,
        description="Attach team-total and margin-of-victory props to every market."
    )

    # ─────────────────────────────────────────────────────────────────────────
    # WIN PROBABILITY BLENDING
    # ─────────────────────────────────────────────────────────────────────────
    #
    # The caller's probability and the internally computed one are blended with
    # a threshold rule. The thresholds are product policy, not statistics.
    # ─────────────────────────────────────────────────────────────────────────

    coin_flip_band: float = Field(
        default=0.05,
        description="Computed probability within this distance of 0.5 defers to the caller."
    )
    computed_probability_weight: float = Field(
        default=0.70,
        description="Weight on the computed probability outside the coin-flip band."
    )
    power_probability_factor: float = Field(
        default=0.02,
        description="Win probability added per point of power differential."
    )
    min_win_probability: float = Field(default=0.10)
    max_win_probability: float = Field(default=0.90)

    # ─────────────────────────────────────────────────────────────────────────
    # DISTRIBUTION SPREAD MODEL
    # ─────────────────────────────────────────────────────────────────────────

    raw_margin_weight: float = Field(
        default=0.65,
        description="Weight on the raw season scoring margin."
    )
    power_margin_weight: float = Field(
        default=0.30,
        description="Weight on the power-score derived margin."
    )
    momentum_margin_weight: float = Field(
        default=0.05,
        description="Weight on the momentum-component difference."
    )
    power_margin_points: float = Field(
        default=2.5,
        description="Points of margin per point of power differential."
    )
    max_expected_margin: float = Field(
        default=20.0,
        description="Clamp on the blended expected margin (points)."
    )
    consistency_sigma_reduction: float = Field(
        default=0.30,
        description="Max fractional sigma reduction for perfectly consistent matchups."
    )
    momentum_sigma_factor: float = Field(
        default=0.95,
        description="Sigma multiplier when both teams carry positive momentum."
    )
    min_sigma: float = Field(
        default=6.0,
        description="Minimum allowed margin sigma."
    )

    # ─────────────────────────────────────────────────────────────────────────
    # SCORE VARIANCE
    # ─────────────────────────────────────────────────────────────────────────

    variance_floor: float = Field(
        default=100.0,
        description="Floor on observed score variance (std-dev floor of 10 points)."
    )
    base_coefficient_of_variation: float = Field(
        default=0.12,
        description="Proxy CV for teams without history, before the scoring-level term."
    )
    coefficient_of_variation_per_point: float = Field(
        default=0.001,
        description="Proxy CV added per point of average score."
    )

    # ─────────────────────────────────────────────────────────────────────────
    # PICK'EM
    # ─────────────────────────────────────────────────────────────────────────

    pickem_gap_threshold: float = Field(
        default=5.0,
        description="Raw scoring gap below which a sub-half-point line becomes PK."
    )
    pickem_power_threshold: float = Field(
        default=1.0,
        description="Power differential below which a sub-half-point line becomes PK."
    )

    # ─────────────────────────────────────────────────────────────────────────
    # TOTALS
    # ─────────────────────────────────────────────────────────────────────────

    default_total: float = Field(
        default=220.0,
        description="Total used when averages are missing or implausible."
    )
    min_plausible_total: float = Field(default=150.0)
    min_total: float = Field(default=180.0)
    max_total: float = Field(default=320.0)
    total_variance: float = Field(
        default=0.06,
        description="Width of the seeded multiplicative total jitter (0.06 = +/-3%)."
    )
    early_season_week: int = Field(
        default=3,
        description="Weeks up to and including this one get the early-season bump."
    )
    early_season_inflation: float = Field(default=0.02)
    pace_per_power_point: float = Field(
        default=0.01,
        description="Total pace multiplier added per point of power differential."
    )


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_nested_delimiter="__")

    service_version: str = APP_VERSION

    engine: EngineConfig = Field(default_factory=EngineConfig)


# Global settings instance
settings = Settings()
