"""Pydantic v2 models for marketplace entities."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from marketplace.domain.types import ApplicationStatus, CampaignStatus, UserRole


def _normalize_niches(v: object) -> object:
    """Lower-case and strip niche labels, dropping blanks."""
    if v is None:
        return frozenset()
    if isinstance(v, str):
        v = [v]
    if isinstance(v, (list, tuple, set, frozenset)):
        return frozenset(str(n).strip().lower() for n in v if str(n).strip())
    return v


class AudienceRange(BaseModel):
    """Desired audience size window for a campaign.

    Either bound may be omitted; an omitted ``max_size`` means unbounded.
    """

    model_config = ConfigDict(frozen=True)

    min_size: int | None = None
    max_size: int | None = None

    @field_validator("min_size", "max_size")
    @classmethod
    def bounds_must_be_positive(cls, v: int | None) -> int | None:
        """Ensure bounds are positive when given."""
        if v is not None and v <= 0:
            raise ValueError("audience bounds must be positive")
        return v

    @model_validator(mode="after")
    def min_must_not_exceed_max(self) -> "AudienceRange":
        """Ensure min_size does not exceed max_size."""
        if (
            self.min_size is not None
            and self.max_size is not None
            and self.min_size > self.max_size
        ):
            raise ValueError(
                f"min_size ({self.min_size}) must not exceed max_size ({self.max_size})"
            )
        return self


class Campaign(BaseModel):
    """A brand-initiated offer defining budget, niches, and schedule."""

    model_config = ConfigDict(frozen=True)

    id: str
    brand_id: str
    title: str = ""
    description: str = ""
    target_niches: frozenset[str] = Field(default_factory=frozenset)
    target_location: str | None = None
    target_audience: AudienceRange | None = None
    budget: Decimal | None = None
    status: CampaignStatus = CampaignStatus.DRAFT
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("target_niches", mode="before")
    @classmethod
    def normalize_niches(cls, v: object) -> object:
        """Accept any iterable of niche labels and normalize them."""
        return _normalize_niches(v)

    @field_validator("budget", mode="before")
    @classmethod
    def reject_float_budget(cls, v: object) -> object:
        """Reject float inputs for budget to prevent precision errors."""
        if isinstance(v, float):
            raise ValueError("Use Decimal or string, not float, for budget")
        return v

    @field_validator("id", "brand_id")
    @classmethod
    def ids_must_not_be_empty(cls, v: str) -> str:
        """Ensure identifiers are not empty or whitespace-only."""
        if not v.strip():
            raise ValueError("identifier must not be empty")
        return v

    @model_validator(mode="after")
    def end_must_not_precede_start(self) -> "Campaign":
        """Ensure the campaign does not end before it starts."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) must not precede start_date ({self.start_date})"
            )
        return self


class InfluencerProfile(BaseModel):
    """Audience and content profile of an influencer."""

    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str = ""
    niches: frozenset[str] = Field(default_factory=frozenset)
    location: str | None = None
    audience_size: int | None = None
    engagement_rate: float | None = None
    follower_count: int | None = None
    avg_likes: int | None = None
    avg_comments: int | None = None

    @field_validator("niches", mode="before")
    @classmethod
    def normalize_niches(cls, v: object) -> object:
        """Accept any iterable of niche labels and normalize them."""
        return _normalize_niches(v)

    @field_validator("engagement_rate")
    @classmethod
    def engagement_must_be_fraction(cls, v: float | None) -> float | None:
        """Ensure engagement_rate is a fraction between 0 and 1."""
        if v is not None and not 0 <= v <= 1:
            raise ValueError("engagement_rate must be between 0 and 1")
        return v

    @field_validator("audience_size", "follower_count", "avg_likes", "avg_comments")
    @classmethod
    def counts_must_not_be_negative(cls, v: int | None) -> int | None:
        """Ensure count fields are non-negative."""
        if v is not None and v < 0:
            raise ValueError("counts must not be negative")
        return v


class Application(BaseModel):
    """An influencer's request to participate in a campaign."""

    model_config = ConfigDict(frozen=True)

    id: str
    campaign_id: str
    influencer_id: str
    status: ApplicationStatus = ApplicationStatus.PENDING


class Caller(BaseModel):
    """The authenticated user on whose behalf a request is made."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
