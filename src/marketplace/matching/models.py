"""Pydantic v2 models for match results.

``CampaignMatch`` and ``InfluencerMatch`` are tagged on ``kind`` so API
consumers can tell the two directions apart without inspecting which
optional enrichment field happens to be populated.
"""

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.models import Campaign, InfluencerProfile


class BudgetTier(StrEnum):
    """Campaign budget bands used to infer a target audience size."""

    NANO = "nano"
    MICRO = "micro"
    MID = "mid"
    MACRO = "macro"


UnitScore = Annotated[float, Field(ge=0, le=1)]


class MatchBreakdown(BaseModel):
    """Per-factor sub-scores contributing to a match score."""

    model_config = ConfigDict(frozen=True)

    niche: UnitScore
    location: UnitScore
    audience: UnitScore
    engagement: UnitScore
    budget_tier: BudgetTier


class MatchResult(BaseModel):
    """Compatibility of one campaign and one influencer.  Never persisted."""

    model_config = ConfigDict(frozen=True)

    campaign_id: str
    influencer_id: str
    score: int = Field(ge=0, le=100)
    breakdown: MatchBreakdown


class CampaignSummary(BaseModel):
    """Campaign fields returned alongside a campaign match."""

    model_config = ConfigDict(frozen=True)

    id: str
    brand_id: str
    title: str
    description: str
    budget: Decimal | None
    target_niches: list[str]
    target_location: str | None
    start_date: date | None

    @classmethod
    def from_campaign(cls, campaign: Campaign) -> "CampaignSummary":
        return cls(
            id=campaign.id,
            brand_id=campaign.brand_id,
            title=campaign.title,
            description=campaign.description,
            budget=campaign.budget,
            target_niches=sorted(campaign.target_niches),
            target_location=campaign.target_location,
            start_date=campaign.start_date,
        )


class InfluencerSummary(BaseModel):
    """Influencer fields returned alongside an influencer match."""

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str
    niches: list[str]
    audience_size: int | None
    engagement_rate: float | None
    follower_count: int | None

    @classmethod
    def from_profile(cls, profile: InfluencerProfile) -> "InfluencerSummary":
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            niches=sorted(profile.niches),
            audience_size=profile.audience_size,
            engagement_rate=profile.engagement_rate,
            follower_count=profile.follower_count,
        )


class CampaignMatch(BaseModel):
    """A campaign recommended to an influencer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["campaign"] = "campaign"
    match: MatchResult
    campaign: CampaignSummary | None = None

    @property
    def score(self) -> int:
        return self.match.score


class InfluencerMatch(BaseModel):
    """An influencer recommended for a campaign."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["influencer"] = "influencer"
    match: MatchResult
    influencer: InfluencerSummary | None = None

    @property
    def score(self) -> int:
        return self.match.score
