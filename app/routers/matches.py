import uuid
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.db.db import get_repository
from app.dependencies import get_match_review_service, get_matching_engine
from app.matching.engine import MatchingEngine
from app.models.user import User
from app.repository.base import Repository
from app.services.match_review import MatchReviewService
from app.utils.auth_helper import get_authenticated_user, require_admin

router = APIRouter()


class MatchVerifyRequest(BaseModel):
    status: str  # "approved" or "rejected"


@router.get("/pending")
def get_pending_matches(
    repository: Repository = Depends(get_repository),
    admin: User = Depends(require_admin),
):
    return [match.to_dict() for match in repository.list_pending_match_requests()]


@router.get("/my")
def get_my_matches(
    user: User = Depends(get_authenticated_user),
    repository: Repository = Depends(get_repository),
):
    return [match.to_dict() for match in repository.list_user_match_requests(user.id)]


@router.get("/{match_id}/score")
def get_match_score(
    match_id: uuid.UUID,
    repository: Repository = Depends(get_repository),
    engine: MatchingEngine = Depends(get_matching_engine),
    admin: User = Depends(require_admin),
):
    """Score breakdown of a stored match, recomputed from the current items."""
    match = repository.get_match_request_with_items(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match request not found")

    result = engine.score_pair(match.lost_item, match.found_item)

    return {
        "match_id": str(match.id),
        "stored_score": match.match.score,
        "score": result.score,
        "breakdown": result.breakdown.to_dict(),
    }


@router.post("/generate")
def generate_matches(
    engine: MatchingEngine = Depends(get_matching_engine),
    admin: User = Depends(require_admin),
):
    processed = engine.generate_all_matches()

    return {
        "message": f"Generated matches for {processed} items",
        "processed": processed,
    }


@router.post("/{match_id}/verify")
def verify_match(
    match_id: uuid.UUID,
    payload: MatchVerifyRequest,
    service: MatchReviewService = Depends(get_match_review_service),
    admin: User = Depends(require_admin),
):
    match = service.verify(match_id, payload.status)

    return {
        "message": f"Match {match.status} successfully",
        "match": match,
    }
