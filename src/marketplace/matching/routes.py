"""HTTP endpoint serving ranked matches.

``GET /matches`` takes exactly one of ``influencer_id`` or ``campaign_id``.
Influencer matches are visible to that influencer or an admin; campaign
matches to the owning brand or an admin.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from marketplace.auth.access import (
    ensure_can_manage_campaign,
    ensure_can_view_influencer_matches,
    get_caller,
)
from marketplace.dependencies import get_match_finder, get_store
from marketplace.domain.errors import InvalidInputError, NotFoundError
from marketplace.domain.models import Caller
from marketplace.matching.finder import MatchFinder
from marketplace.observability.metrics import MATCH_REQUESTS
from marketplace.store.store import MarketplaceStore

logger = structlog.get_logger()

router = APIRouter()


@router.get("/matches")
def get_matches(
    request: Request,
    influencer_id: str | None = None,
    campaign_id: str | None = None,
    min_score: int | None = None,
    caller: Caller = Depends(get_caller),
    finder: MatchFinder = Depends(get_match_finder),
    store: MarketplaceStore = Depends(get_store),
) -> dict[str, Any]:
    """Return ranked matches for an influencer or for a campaign.

    Raises:
        InvalidInputError: If neither or both anchors are given, or the
            threshold is out of range.
        UnauthorizedError: If the caller may not view these matches.
        NotFoundError: If the anchor entity does not exist.
    """
    if min_score is None:
        min_score = request.app.state.settings.default_min_score

    if influencer_id and not campaign_id:
        ensure_can_view_influencer_matches(caller, influencer_id)
        MATCH_REQUESTS.labels(direction="campaigns").inc()
        campaign_matches = finder.find_matching_campaigns(influencer_id, min_score)
        return {"matches": [m.model_dump(mode="json") for m in campaign_matches]}

    if campaign_id and not influencer_id:
        campaign = store.get_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError("campaign", campaign_id)
        ensure_can_manage_campaign(caller, campaign)
        MATCH_REQUESTS.labels(direction="influencers").inc()
        influencer_matches = finder.find_matching_influencers(campaign_id, min_score)
        return {"matches": [m.model_dump(mode="json") for m in influencer_matches]}

    raise InvalidInputError(
        "Provide either influencer_id or campaign_id parameter, but not both"
    )
