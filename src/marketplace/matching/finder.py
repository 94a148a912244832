"""Rank campaigns for an influencer, or influencers for a campaign.

Read-only: fetches the anchor entity and the candidate population from the
store, scores every candidate, keeps those at or above the threshold, and
returns them best-first.
"""

from __future__ import annotations

from datetime import date

import structlog

from marketplace.domain.errors import InvalidInputError, NotFoundError
from marketplace.domain.models import Campaign
from marketplace.domain.types import MATCHABLE_CAMPAIGN_STATUSES
from marketplace.matching.models import (
    CampaignMatch,
    CampaignSummary,
    InfluencerMatch,
    InfluencerSummary,
)
from marketplace.matching.scoring import score_match
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()

DEFAULT_MIN_SCORE = 60

# Sorts campaigns without a start date after every dated campaign
_NO_START_DATE = date.max


def validate_min_score(min_score: int) -> int:
    """Ensure *min_score* is an integer threshold in [0, 100].

    Raises:
        InvalidInputError: If the threshold is outside the score range.
    """
    if isinstance(min_score, bool) or not isinstance(min_score, int):
        raise InvalidInputError(f"min_score must be an integer, got {min_score!r}")
    if not 0 <= min_score <= 100:
        raise InvalidInputError(f"min_score must be between 0 and 100, got {min_score}")
    return min_score


def _campaign_sort_key(item: tuple[CampaignMatch, Campaign]) -> tuple[int, date, str]:
    match, campaign = item
    return (-match.score, campaign.start_date or _NO_START_DATE, campaign.id)


class MatchFinder:
    """Orchestrates scoring across a candidate population.

    Args:
        store: The marketplace store to read campaigns, profiles, and
               applications from.
    """

    def __init__(self, store: MarketplaceStore) -> None:
        self._store = store

    def find_matching_campaigns(
        self,
        influencer_id: str,
        min_score: int = DEFAULT_MIN_SCORE,
        *,
        exclude_applied: bool = True,
    ) -> list[CampaignMatch]:
        """Return campaigns matching an influencer, best first.

        Candidates are campaigns in a matchable status (active or scheduled).
        Ties on score are broken by earliest start date, then campaign ID.

        Args:
            influencer_id: The influencer to find campaigns for.
            min_score: Minimum score (inclusive) a campaign must reach.
            exclude_applied: Skip campaigns the influencer already applied to.

        Returns:
            The ranked matches; empty if no campaign clears the threshold.

        Raises:
            InvalidInputError: If *min_score* is outside [0, 100].
            NotFoundError: If the influencer does not exist.
        """
        validate_min_score(min_score)
        influencer = self._store.get_influencer(influencer_id)
        if influencer is None:
            raise NotFoundError("influencer", influencer_id)

        campaigns = self._store.list_campaigns(MATCHABLE_CAMPAIGN_STATUSES)
        if exclude_applied:
            applied = self._store.applied_campaign_ids(influencer_id)
            campaigns = [c for c in campaigns if c.id not in applied]

        scored: list[tuple[CampaignMatch, Campaign]] = []
        for campaign in campaigns:
            result = score_match(campaign, influencer)
            if result.score >= min_score:
                match = CampaignMatch(
                    match=result,
                    campaign=CampaignSummary.from_campaign(campaign),
                )
                scored.append((match, campaign))

        scored.sort(key=_campaign_sort_key)
        logger.info(
            "campaign_matches_found",
            influencer_id=influencer_id,
            candidates=len(campaigns),
            matches=len(scored),
            min_score=min_score,
        )
        return [match for match, _ in scored]

    def find_matching_influencers(
        self,
        campaign_id: str,
        min_score: int = DEFAULT_MIN_SCORE,
        *,
        exclude_applied: bool = True,
    ) -> list[InfluencerMatch]:
        """Return influencers matching a campaign, best first.

        Ties on score are broken by influencer ID.

        Args:
            campaign_id: The campaign to find influencers for.
            min_score: Minimum score (inclusive) an influencer must reach.
            exclude_applied: Skip influencers who already applied.

        Returns:
            The ranked matches; empty if no influencer clears the threshold.

        Raises:
            InvalidInputError: If *min_score* is outside [0, 100].
            NotFoundError: If the campaign does not exist.
        """
        validate_min_score(min_score)
        campaign = self._store.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError("campaign", campaign_id)

        influencers = self._store.list_influencers()
        if exclude_applied:
            applied = self._store.applicant_ids(campaign_id)
            influencers = [i for i in influencers if i.id not in applied]

        matches: list[InfluencerMatch] = []
        for influencer in influencers:
            result = score_match(campaign, influencer)
            if result.score >= min_score:
                matches.append(
                    InfluencerMatch(
                        match=result,
                        influencer=InfluencerSummary.from_profile(influencer),
                    )
                )

        matches.sort(key=lambda m: (-m.score, m.match.influencer_id))
        logger.info(
            "influencer_matches_found",
            campaign_id=campaign_id,
            candidates=len(influencers),
            matches=len(matches),
            min_score=min_score,
        )
        return matches
