"""Campaign/influencer matching.

Re-exports key functions and types for convenient access:
    from marketplace.matching import score_match, MatchFinder, MatchResult
"""

from marketplace.matching.finder import DEFAULT_MIN_SCORE, MatchFinder, validate_min_score
from marketplace.matching.models import (
    BudgetTier,
    CampaignMatch,
    CampaignSummary,
    InfluencerMatch,
    InfluencerSummary,
    MatchBreakdown,
    MatchResult,
)
from marketplace.matching.scoring import budget_tier, score_match

__all__ = [
    "DEFAULT_MIN_SCORE",
    "BudgetTier",
    "CampaignMatch",
    "CampaignSummary",
    "InfluencerMatch",
    "InfluencerSummary",
    "MatchBreakdown",
    "MatchFinder",
    "MatchResult",
    "budget_tier",
    "score_match",
    "validate_min_score",
]
