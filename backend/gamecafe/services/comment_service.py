"""
Game comments: visitors post, admins approve or delete. Only approved comments are public.
"""
import logging
from typing import Any

from sqlalchemy.orm import Session

from gamecafe.core.errors import NotFoundError, PartyFinderValidationError
from gamecafe.models.board_game import BoardGame
from gamecafe.models.game_comment import GameComment

logger = logging.getLogger(__name__)


def comment_to_dict(row: GameComment, game_name: str | None = None) -> dict[str, Any]:
    return {
        "id": row.id,
        "gameId": row.game_bgg_id,
        "gameName": game_name,
        "authorName": row.author_name,
        "content": row.content,
        "isApproved": bool(row.is_approved),
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }


def create_comment(db: Session, game_bgg_id: str, author_name: str, content: str) -> GameComment:
    """New comments start unapproved."""
    author_name = (author_name or "").strip()
    content = (content or "").strip()
    if not game_bgg_id or not author_name or not content:
        raise PartyFinderValidationError("Missing required fields")
    if not db.query(BoardGame.id).filter(BoardGame.bgg_id == game_bgg_id).first():
        raise NotFoundError("Game not found")
    row = GameComment(game_bgg_id=game_bgg_id, author_name=author_name, content=content, is_approved=False)
    try:
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.info("New comment %s on game %s awaiting approval", row.id, game_bgg_id)
    return row


def list_comments(
    db: Session,
    *,
    game_bgg_id: str | None = None,
    approved: bool | None = True,
) -> list[dict[str, Any]]:
    """Newest first, with the game name joined in. approved=None returns both states."""
    q = (
        db.query(GameComment, BoardGame.name)
        .outerjoin(BoardGame, GameComment.game_bgg_id == BoardGame.bgg_id)
    )
    if game_bgg_id:
        q = q.filter(GameComment.game_bgg_id == game_bgg_id)
    if approved is not None:
        q = q.filter(GameComment.is_approved.is_(approved))
    rows = q.order_by(GameComment.created_at.desc(), GameComment.id.desc()).all()
    return [comment_to_dict(comment, name) for comment, name in rows]


def _get_comment(db: Session, comment_id: int) -> GameComment:
    row = db.query(GameComment).filter(GameComment.id == comment_id).first()
    if not row:
        raise NotFoundError("Comment not found")
    return row


def approve_comment(db: Session, comment_id: int) -> GameComment:
    row = _get_comment(db, comment_id)
    row.is_approved = True
    db.commit()
    db.refresh(row)
    logger.info("Approved comment %s", comment_id)
    return row


def delete_comment(db: Session, comment_id: int) -> None:
    row = _get_comment(db, comment_id)
    db.delete(row)
    db.commit()
    logger.info("Deleted comment %s", comment_id)
