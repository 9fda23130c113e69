"""
Credit Assessment Engine for venue revenue-based financing
"""

from .models import (
    AssessmentResult,
    CreditGrade,
    CreditRecommendation,
    EligibilityGates,
    EligibilityStatus,
    ScoreBreakdown,
    TransactionRecord,
    TransactionRole,
    TrendDirection,
    VenueIdentity,
    VenueMetrics,
)
from .settings import ScoringSettings, get_scoring_settings, scoring_settings
from .venue_metrics import derive_venue_metrics
from .gates import check_eligibility_gates
from .pillars import (
    PILLAR_SCORERS,
    score_volume,
    score_growth,
    score_stability,
    score_risk,
    score_maturity,
)
from .composite import calculate_score_breakdown, determine_grade, determine_eligibility
from .alerts import generate_alerts
from .recommendation import calculate_recommendation, estimate_term_days
from .assessment import assess_venue, explain_assessment

__all__ = [
    # Settings
    "ScoringSettings",
    "get_scoring_settings",
    "scoring_settings",
    # Models
    "AssessmentResult",
    "CreditGrade",
    "CreditRecommendation",
    "EligibilityGates",
    "EligibilityStatus",
    "ScoreBreakdown",
    "TransactionRecord",
    "TransactionRole",
    "TrendDirection",
    "VenueIdentity",
    "VenueMetrics",
    # Metrics
    "derive_venue_metrics",
    # Gates
    "check_eligibility_gates",
    # Pillars
    "PILLAR_SCORERS",
    "score_volume",
    "score_growth",
    "score_stability",
    "score_risk",
    "score_maturity",
    # Composite
    "calculate_score_breakdown",
    "determine_grade",
    "determine_eligibility",
    # Alerts
    "generate_alerts",
    # Recommendation
    "calculate_recommendation",
    "estimate_term_days",
    # Assessment
    "assess_venue",
    "explain_assessment",
]
