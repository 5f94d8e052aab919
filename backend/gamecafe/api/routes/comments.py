"""
Game comments: visitors post, the public sees approved comments, admins moderate.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gamecafe.api.deps import get_optional_user, require_admin
from gamecafe.core.constants import COMMENT_AUTHOR_MAX_LENGTH, COMMENT_CONTENT_MAX_LENGTH
from gamecafe.core.errors import PartyFinderError, PermissionDeniedError, to_http
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.comment_service import (
    approve_comment,
    comment_to_dict,
    create_comment,
    delete_comment,
    list_comments,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    game_id: str = Field(..., alias="gameId", min_length=1)
    author_name: str = Field(..., alias="authorName", min_length=1, max_length=COMMENT_AUTHOR_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=COMMENT_CONTENT_MAX_LENGTH)


class CommentModeration(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_approved: bool = Field(..., alias="isApproved")


@router.post("", status_code=201)
def post_comment(body: CommentCreate, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Anyone may comment; the comment stays hidden until approved."""
    try:
        row = create_comment(db, body.game_id, body.author_name, body.content)
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error creating comment: %s", e)
        raise HTTPException(status_code=500, detail="Failed to create comment") from e
    return comment_to_dict(row)


@router.get("")
def get_comments(
    game_id: str | None = Query(None, alias="gameId"),
    approved_only: bool = Query(True, alias="approvedOnly"),
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> list[dict[str, Any]]:
    """
    approvedOnly=true (default): public, approved comments.
    approvedOnly=false: the moderation queue of unapproved comments (admin only).
    """
    if not approved_only and not (user and user.is_admin):
        raise to_http(PermissionDeniedError("Admin access required"))
    try:
        return list_comments(db, game_bgg_id=game_id, approved=approved_only)
    except Exception as e:
        logger.exception("Error fetching comments: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch comments") from e


@router.put("/{comment_id}")
def moderate_comment(
    comment_id: int,
    body: CommentModeration,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """isApproved=true publishes the comment; isApproved=false rejects (deletes) it."""
    try:
        if body.is_approved:
            return comment_to_dict(approve_comment(db, comment_id))
        delete_comment(db, comment_id)
    except PartyFinderError as e:
        raise to_http(e) from e
    logger.info("Comment %s rejected by %s", comment_id, admin.username)
    return {"message": "Comment deleted successfully"}


@router.delete("/{comment_id}")
def remove_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    try:
        delete_comment(db, comment_id)
    except PartyFinderError as e:
        raise to_http(e) from e
    logger.info("Comment %s deleted by %s", comment_id, admin.username)
    return {"message": "Comment deleted successfully"}
