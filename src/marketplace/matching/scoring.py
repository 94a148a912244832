"""Campaign/influencer compatibility scoring.

Pure functions only: no I/O, no clock, no randomness.  The same campaign and
profile always produce the same ``MatchResult``.

The score is a weighted sum of four sub-scores, each in [0, 1]:

- **niche**: share of the campaign's target niches the influencer covers.
- **location**: exact (case-insensitive) location match; neutral when unknown.
- **audience**: fit of the influencer's audience size against the campaign's
  explicit target range, or the range implied by its budget tier.
- **engagement**: engagement rate relative to the 5% "excellent" threshold.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from marketplace.domain.models import AudienceRange, Campaign, InfluencerProfile
from marketplace.matching.models import BudgetTier, MatchBreakdown, MatchResult

WEIGHT_NICHE = Decimal("0.4")
WEIGHT_LOCATION = Decimal("0.3")
WEIGHT_AUDIENCE = Decimal("0.2")
WEIGHT_ENGAGEMENT = Decimal("0.1")

# Sub-score used when the data needed to judge a factor is missing
NEUTRAL = 0.5

# Engagement rate at or above which the engagement factor earns full credit
EXCELLENT_ENGAGEMENT = 0.05

# (upper budget bound exclusive, tier, audience range).  Checked in order;
# budgets at or above the last bound fall into MACRO.
BUDGET_TIERS: list[tuple[Decimal, BudgetTier, AudienceRange]] = [
    (Decimal("1000"), BudgetTier.NANO, AudienceRange(min_size=1_000, max_size=10_000)),
    (Decimal("5000"), BudgetTier.MICRO, AudienceRange(min_size=10_000, max_size=50_000)),
    (Decimal("20000"), BudgetTier.MID, AudienceRange(min_size=50_000, max_size=250_000)),
]
MACRO_AUDIENCE = AudienceRange(min_size=250_000)


def budget_tier(budget: Decimal | None) -> tuple[BudgetTier, AudienceRange]:
    """Return the budget tier and its target audience range.

    A missing, zero, or negative budget is the lowest tier.
    """
    if budget is None or budget <= 0:
        _, tier, audience = BUDGET_TIERS[0]
        return tier, audience
    for upper, tier, audience in BUDGET_TIERS:
        if budget < upper:
            return tier, audience
    return BudgetTier.MACRO, MACRO_AUDIENCE


def niche_score(campaign_niches: frozenset[str], influencer_niches: frozenset[str]) -> float:
    """Fraction of the campaign's niches the influencer covers.

    Empty niche sets on either side score zero.
    """
    if not campaign_niches or not influencer_niches:
        return 0.0
    return len(campaign_niches & influencer_niches) / len(campaign_niches)


def location_score(target_location: str | None, location: str | None) -> float:
    if not target_location or not location:
        return NEUTRAL
    return 1.0 if target_location.strip().lower() == location.strip().lower() else 0.0


def audience_score(target: AudienceRange, audience_size: int | None) -> float:
    """Score how well *audience_size* fits inside *target*.

    Inside the range scores 1.  Below the minimum scales linearly towards 0;
    above the maximum decays by the relative overshoot.
    """
    if audience_size is None:
        return NEUTRAL
    if target.min_size is not None and audience_size < target.min_size:
        return max(0.0, audience_size / target.min_size)
    if target.max_size is not None and audience_size > target.max_size:
        return max(0.0, 1 - (audience_size - target.max_size) / target.max_size)
    return 1.0


def effective_engagement_rate(influencer: InfluencerProfile) -> float | None:
    """Return the engagement rate, deriving it from interaction counts if needed."""
    if influencer.engagement_rate is not None:
        return influencer.engagement_rate
    if influencer.avg_likes is None and influencer.avg_comments is None:
        return None
    if not influencer.follower_count:
        return None
    interactions = (influencer.avg_likes or 0) + (influencer.avg_comments or 0)
    return interactions / influencer.follower_count


def engagement_score(rate: float | None) -> float:
    if rate is None:
        return NEUTRAL
    return min(1.0, rate / EXCELLENT_ENGAGEMENT)


def score_match(campaign: Campaign, influencer: InfluencerProfile) -> MatchResult:
    """Compute the compatibility of *influencer* with *campaign*.

    Args:
        campaign: The campaign being matched.
        influencer: The influencer profile being matched.

    Returns:
        A ``MatchResult`` whose ``score`` is an integer in [0, 100] and whose
        ``breakdown`` holds the four sub-scores.
    """
    tier, tier_audience = budget_tier(campaign.budget)
    target_audience = campaign.target_audience or tier_audience

    breakdown = MatchBreakdown(
        niche=niche_score(campaign.target_niches, influencer.niches),
        location=location_score(campaign.target_location, influencer.location),
        audience=audience_score(target_audience, influencer.audience_size),
        engagement=engagement_score(effective_engagement_rate(influencer)),
        budget_tier=tier,
    )

    weighted = (
        Decimal(str(breakdown.niche)) * WEIGHT_NICHE
        + Decimal(str(breakdown.location)) * WEIGHT_LOCATION
        + Decimal(str(breakdown.audience)) * WEIGHT_AUDIENCE
        + Decimal(str(breakdown.engagement)) * WEIGHT_ENGAGEMENT
    )
    score = int((weighted * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return MatchResult(
        campaign_id=campaign.id,
        influencer_id=influencer.id,
        score=max(0, min(100, score)),
        breakdown=breakdown,
    )
