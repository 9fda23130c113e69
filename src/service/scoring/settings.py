"""
Scoring Settings for the Venue Credit Assessment Engine.

This module contains all configurable parameters for the credit scoring
system. Thresholds are calibrated for restaurant/retail venues processing in
local currency units, and can be recalibrated per market via environment
variables without touching scoring logic.

Environment variables use the SCORING_ prefix:
    SCORING_GATE_MIN_ANNUALIZED_VOLUME=300000
    SCORING_WEIGHT_VOLUME=0.25
    SCORING_OFFER_TERMS_JSON='{"A": [0.25, 1.08, 0.12], ...}'

Usage:
    from src.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    minimum = scoring_settings.gate_min_days_in_operation

    # Or create custom settings for testing
    custom = ScoringSettings(gate_min_transactions=100)
"""

import json
import math
from functools import lru_cache
from typing import Dict, List, Tuple

from pydantic import Field, PrivateAttr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_tiers(v: str, name: str) -> List[Tuple[float, float]]:
    """Parse and validate a [[threshold, score], ...] tier table."""
    try:
        tiers = json.loads(v)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON for {name}: {e}")

    if not isinstance(tiers, list) or len(tiers) < 2:
        raise ValueError(f"{name} must be a list with at least two tiers")

    previous = None
    for tier in tiers:
        if not isinstance(tier, list) or len(tier) != 2:
            raise ValueError(f"Each {name} entry must be [threshold, score]")
        if not all(isinstance(x, (int, float)) for x in tier):
            raise ValueError(f"{name} values must be numbers")
        threshold, score = tier
        if threshold <= 0:
            raise ValueError(f"{name} thresholds must be positive: {threshold}")
        if not 0 <= score <= 100:
            raise ValueError(f"{name} scores must be within 0-100: {score}")
        if previous is not None and (threshold <= previous[0] or score < previous[1]):
            raise ValueError(f"{name} must be strictly ascending by threshold")
        previous = tier

    return [(float(t), float(s)) for t, s in tiers]


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the venue credit scoring algorithm.

    All settings can be overridden via environment variables with SCORING_ prefix.
    All monetary values are in currency units (not cents).
    All scores are 0-100.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Parsed once from the *_json fields in validate_consistency
    _volume_tiers: List[Tuple[float, float]] = PrivateAttr(default_factory=list)
    _maturity_tiers: List[Tuple[float, float]] = PrivateAttr(default_factory=list)
    _offer_terms: Dict[str, Tuple[float, float, float]] = PrivateAttr(default_factory=dict)

    # === Eligibility Gates (hard requirements, inclusive bounds) ===
    gate_min_days_in_operation: int = Field(
        default=90,
        ge=0,
        description="Minimum days since first sale",
    )
    gate_min_annualized_volume: float = Field(
        default=300_000.0,
        ge=0.0,
        description="Minimum annualized sales volume",
    )
    gate_min_transactions: int = Field(
        default=200,
        ge=0,
        description="Minimum number of sales in the trailing year",
    )
    gate_max_chargeback_rate: float = Field(
        default=0.015,
        ge=0.0,
        le=1.0,
        description="Maximum chargeback rate (1.5% industry standard)",
    )
    gate_max_days_inactive: int = Field(
        default=14,
        ge=0,
        description="Maximum days since the last sale",
    )
    gate_min_operating_days_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Minimum share of days with at least one sale",
    )
    gate_failure_penalty: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Points subtracted from the composite when any gate fails",
    )

    # === Pillar Weights ===
    weight_volume: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_growth: float = Field(default=0.20, ge=0.0, le=1.0)
    weight_stability: float = Field(default=0.25, ge=0.0, le=1.0)
    weight_risk: float = Field(default=0.20, ge=0.0, le=1.0)
    weight_maturity: float = Field(default=0.10, ge=0.0, le=1.0)

    # === Metrics Derivation ===
    lookback_days: int = Field(
        default=365,
        gt=0,
        description="Trailing window of transactions considered",
    )
    new_business_days: int = Field(
        default=180,
        gt=0,
        description="Businesses younger than this are treated as new",
    )
    annualize_min_days: int = Field(
        default=30,
        ge=1,
        description="Volume is annualized from this many days of history",
    )
    annualize_max_days: int = Field(
        default=330,
        ge=1,
        description="Volume is no longer annualized at or beyond this many days",
    )
    trend_growing_threshold: float = Field(
        default=5.0,
        description="3-month trend at or above this is GROWING (percent)",
    )
    trend_declining_threshold: float = Field(
        default=-5.0,
        description="3-month trend at or below this is DECLINING (percent)",
    )
    consistent_month_ratio: float = Field(
        default=0.5,
        gt=0.0,
        description="Month counts as consistent at this share of the monthly average",
    )
    large_transaction_multiplier: float = Field(
        default=3.0,
        gt=0.0,
        description="Sales above this multiple of the average ticket are 'large'",
    )
    no_activity_days: int = Field(
        default=999,
        description="Days-since-last-transaction reported when there are no sales",
    )

    # === Volume Pillar ===
    volume_tiers_json: str = Field(
        default="[[300000,30],[500000,50],[1000000,65],[2500000,80],[5000000,90],[10000000,100]]",
        description="Annualized volume tiers as JSON: [[threshold, base_score], ...]",
    )
    velocity_high_tx_per_day: float = Field(default=20.0, description="+5 above this")
    velocity_medium_tx_per_day: float = Field(default=10.0, description="+3 above this")

    # === Growth Pillar ===
    growth_excellent: float = Field(default=15.0, description="3-month trend, percent")
    growth_good: float = Field(default=5.0)
    growth_stable: float = Field(default=0.0)
    growth_declining: float = Field(default=-5.0)

    new_business_velocity_strong: float = Field(default=8.0, description="tx per operating day")
    new_business_velocity_good: float = Field(default=5.0)
    new_business_velocity_developing: float = Field(default=3.0)

    # === Stability Pillar ===
    variance_excellent: float = Field(default=0.15, description="Coefficient of variation")
    variance_good: float = Field(default=0.25)
    variance_acceptable: float = Field(default=0.40)
    variance_poor: float = Field(default=0.60)

    operating_days_excellent: float = Field(default=0.90)
    operating_days_good: float = Field(default=0.75)
    operating_days_acceptable: float = Field(default=0.60)

    # === Risk Pillar ===
    chargeback_excellent: float = Field(default=0.001)
    chargeback_good: float = Field(default=0.005)
    chargeback_acceptable: float = Field(default=0.01)
    chargeback_concerning: float = Field(default=0.015)

    refund_excellent: float = Field(default=0.02)
    refund_good: float = Field(default=0.05)
    refund_acceptable: float = Field(default=0.08)
    refund_concerning: float = Field(default=0.12)

    large_transaction_high: float = Field(default=0.10)
    large_transaction_elevated: float = Field(default=0.05)

    card_ratio_high: float = Field(default=0.8)
    card_ratio_medium: float = Field(default=0.6)

    # === Maturity Pillar ===
    maturity_tiers_json: str = Field(
        default="[[90,50],[180,65],[365,80],[730,95]]",
        description="Days-in-operation tiers as JSON: [[days, base_score], ...]",
    )
    maturity_density_tx_per_day: float = Field(
        default=5.0,
        description="Transactions per day earning the data-quality bonus",
    )

    # === Grades ===
    grade_a_min_score: int = Field(default=80, ge=0, le=100)
    grade_b_min_score: int = Field(default=65, ge=0, le=100)
    grade_c_min_score: int = Field(default=50, ge=0, le=100)

    # === Alerts ===
    alert_declining_mom_percent: float = Field(default=-10.0)
    alert_low_activity_days: int = Field(default=7)
    alert_high_volatility_cv: float = Field(default=0.5)
    alert_low_card_ratio: float = Field(default=0.3)

    # === Credit Offer Calculation ===
    offer_terms_json: str = Field(
        default='{"A": [0.25, 1.08, 0.12], "B": [0.18, 1.12, 0.15], "C": [0.12, 1.18, 0.18]}',
        description=(
            "Offer terms per grade as JSON: "
            "{grade: [credit_percent_of_volume, factor_rate, daily_repayment_percent]}"
        ),
    )
    min_credit_offer: float = Field(default=50_000.0, ge=0.0)
    max_credit_offer: float = Field(default=3_000_000.0, gt=0.0)
    credit_offer_rounding: float = Field(
        default=10_000.0,
        gt=0.0,
        description="Recommended limits are rounded to a multiple of this",
    )
    default_term_days: int = Field(
        default=365,
        gt=0,
        description="Estimated term used when daily repayment cannot be computed",
    )

    @field_validator("volume_tiers_json", "maturity_tiers_json")
    @classmethod
    def validate_tiers_json(cls, v: str, info) -> str:
        """Validate that tier tables are parseable and ascending."""
        _parse_tiers(v, info.field_name)
        return v

    @field_validator("offer_terms_json")
    @classmethod
    def validate_offer_terms_json(cls, v: str) -> str:
        """Validate the per-grade offer terms table."""
        try:
            terms = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")

        if not isinstance(terms, dict):
            raise ValueError("Offer terms must be an object keyed by grade")
        for grade, values in terms.items():
            if grade not in ("A", "B", "C"):
                raise ValueError(f"Offers can only be defined for grades A, B, C: {grade}")
            if not isinstance(values, list) or len(values) != 3:
                raise ValueError(
                    "Each grade must be [credit_percent, factor_rate, repayment_percent]"
                )
            credit_percent, factor_rate, repayment_percent = values
            if not 0 < credit_percent <= 1:
                raise ValueError(f"credit_percent out of range for {grade}: {credit_percent}")
            if factor_rate < 1:
                raise ValueError(f"factor_rate must be >= 1 for {grade}: {factor_rate}")
            if not 0 < repayment_percent <= 1:
                raise ValueError(
                    f"repayment_percent out of range for {grade}: {repayment_percent}"
                )
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "ScoringSettings":
        """Cross-field checks: weights, grade order, offer bounds."""
        total = math.fsum(self.pillar_weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Pillar weights must sum to 1.0, got {total}")

        if not (self.grade_a_min_score > self.grade_b_min_score > self.grade_c_min_score):
            raise ValueError("Grade cutoffs must be strictly descending (A > B > C)")

        if self.min_credit_offer > self.max_credit_offer:
            raise ValueError(
                f"min_credit_offer ({self.min_credit_offer}) > "
                f"max_credit_offer ({self.max_credit_offer})"
            )

        if self.annualize_min_days >= self.annualize_max_days:
            raise ValueError("annualize_min_days must be below annualize_max_days")

        self._volume_tiers = _parse_tiers(self.volume_tiers_json, "volume_tiers_json")
        self._maturity_tiers = _parse_tiers(self.maturity_tiers_json, "maturity_tiers_json")
        self._offer_terms = {
            grade: tuple(values) for grade, values in json.loads(self.offer_terms_json).items()
        }

        return self

    @property
    def pillar_weights(self) -> Dict[str, float]:
        """Pillar name -> weight in the composite score."""
        return {
            "volume": self.weight_volume,
            "growth": self.weight_growth,
            "stability": self.weight_stability,
            "risk": self.weight_risk,
            "maturity": self.weight_maturity,
        }

    @property
    def volume_tiers(self) -> List[Tuple[float, float]]:
        return self._volume_tiers

    @property
    def maturity_tiers(self) -> List[Tuple[float, float]]:
        return self._maturity_tiers

    @property
    def grade_cutoffs(self) -> List[Tuple[str, int]]:
        """Ordered (grade, minimum score) pairs, best grade first."""
        return [
            ("A", self.grade_a_min_score),
            ("B", self.grade_b_min_score),
            ("C", self.grade_c_min_score),
        ]

    @property
    def offer_terms(self) -> Dict[str, Tuple[float, float, float]]:
        """Grade -> (credit_percent, factor_rate, repayment_percent)."""
        return self._offer_terms


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
