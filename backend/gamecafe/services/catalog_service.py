"""
Board game catalog: list/filter/sort/paginate, single game with similar games,
name search for the preference picker, import from BoardGameGeek, and admin edits.
"""
import json
import logging
import math
import time
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from gamecafe.core.constants import (
    BGG_REQUEST_DELAY_SECONDS,
    GAME_SEARCH_LIMIT,
    GAME_SEARCH_MIN_QUERY_LENGTH,
    SIMILAR_GAMES_LIMIT,
)
from gamecafe.core.errors import NotFoundError, PartyFinderValidationError
from gamecafe.models.board_game import BoardGame
from gamecafe.models.game_comment import GameComment
from gamecafe.models.user_game_preference import UserGamePreference
from gamecafe.services.bgg.client import BggClient
from gamecafe.services.bgg.types import LINK_TYPES, BggGame

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "id": BoardGame.id,
    "name": BoardGame.name,
    "yearPublished": BoardGame.year_published,
    "playingTime": BoardGame.playing_time,
    "minPlayers": BoardGame.min_players,
    "adminNote": BoardGame.admin_note,
}

# Columns an admin may set directly; list-valued ones are stored as JSON text
SCALAR_GAME_FIELDS = frozenset({
    "name",
    "year_published",
    "min_players",
    "max_players",
    "playing_time",
    "min_play_time",
    "max_play_time",
    "age",
    "description",
    "thumbnail",
    "image",
    "is_starred",
    "admin_note",
})
LIST_GAME_FIELDS = frozenset(LINK_TYPES)


def _json_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return []
    return value if isinstance(value, list) else []


def game_to_dict(row: BoardGame) -> dict[str, Any]:
    return {
        "id": row.id,
        "bggId": row.bgg_id,
        "name": row.name,
        "yearPublished": row.year_published,
        "minPlayers": row.min_players,
        "maxPlayers": row.max_players,
        "playingTime": row.playing_time,
        "minPlayTime": row.min_play_time,
        "maxPlayTime": row.max_play_time,
        "age": row.age,
        "description": row.description,
        "thumbnail": row.thumbnail,
        "image": row.image,
        "categories": _json_list(row.categories),
        "mechanics": _json_list(row.mechanics),
        "designers": _json_list(row.designers),
        "artists": _json_list(row.artists),
        "publishers": _json_list(row.publishers),
        "isStarred": bool(row.is_starred),
        "adminNote": row.admin_note,
    }


def list_games(
    db: Session,
    *,
    page: int = 1,
    limit: int = 20,
    sort_by: str = "name",
    sort_order: str = "asc",
    name: str | None = None,
    duration: int | None = None,
    players: int | None = None,
    mechanics: str | None = None,
) -> dict[str, Any]:
    """Filtered, sorted page of the catalog: {data, meta}."""
    if sort_by not in SORTABLE_COLUMNS:
        raise PartyFinderValidationError(f"Invalid sortBy: {sort_by!r}")
    if sort_order not in ("asc", "desc"):
        raise PartyFinderValidationError(f"Invalid sortOrder: {sort_order!r}")

    conditions = []
    if name:
        conditions.append(BoardGame.name.ilike(f"%{name}%"))
    if duration is not None:
        conditions.append(BoardGame.playing_time <= duration)
    if players is not None:
        conditions.append(and_(BoardGame.min_players <= players, BoardGame.max_players >= players))
    if mechanics:
        wanted = [m.strip() for m in mechanics.split(",") if m.strip()]
        if wanted:
            conditions.append(or_(*[BoardGame.mechanics.like(f"%{m}%") for m in wanted]))

    q = db.query(BoardGame)
    if conditions:
        q = q.filter(and_(*conditions))
    total = q.count()
    column = SORTABLE_COLUMNS[sort_by]
    rows = (
        q.order_by(column.desc() if sort_order == "desc" else column.asc(), BoardGame.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "data": [game_to_dict(r) for r in rows],
        "meta": {
            "totalCount": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
        },
    }


def distinct_link_values(db: Session, attr: str) -> list[str]:
    """Unique categories or mechanics across the catalog, in first-seen order (browse filters)."""
    if attr not in ("categories", "mechanics"):
        raise PartyFinderValidationError(f"Unknown game attribute: {attr!r}")
    column = getattr(BoardGame, attr)
    seen: dict[str, None] = {}
    for (raw,) in db.query(column).filter(column.isnot(None)).order_by(BoardGame.id.asc()).all():
        for value in _json_list(raw):
            seen.setdefault(value, None)
    return list(seen)


def get_game_with_similar(db: Session, bgg_id: str) -> dict[str, Any]:
    """One game plus up to 4 others sharing any of its categories."""
    game = db.query(BoardGame).filter(BoardGame.bgg_id == bgg_id).first()
    if not game:
        raise NotFoundError("Game not found")
    categories = _json_list(game.categories)
    similar: list[BoardGame] = []
    if categories:
        similar = (
            db.query(BoardGame)
            .filter(
                or_(*[BoardGame.categories.like(f"%{c}%") for c in categories]),
                BoardGame.bgg_id != bgg_id,
            )
            .limit(SIMILAR_GAMES_LIMIT)
            .all()
        )
    return {"game": game_to_dict(game), "similarGames": [game_to_dict(r) for r in similar]}


def search_games_by_name(db: Session, query: str | None) -> list[dict[str, Any]]:
    """Preference picker search over the café's own collection."""
    if not query or len(query.strip()) < GAME_SEARCH_MIN_QUERY_LENGTH:
        return []
    rows = (
        db.query(BoardGame)
        .filter(BoardGame.name.ilike(f"%{query.strip()}%"))
        .order_by(BoardGame.name.asc())
        .limit(GAME_SEARCH_LIMIT)
        .all()
    )
    return [
        {
            "bggId": r.bgg_id,
            "name": r.name,
            "thumbnail": r.thumbnail,
            "minPlayers": r.min_players,
            "maxPlayers": r.max_players,
            "playingTime": r.playing_time,
            "yearPublished": r.year_published,
        }
        for r in rows
    ]


def import_game(db: Session, game: BggGame) -> tuple[BoardGame, bool]:
    """Insert a BGG game unless its bgg_id is already in the catalog. Returns (row, created)."""
    existing = db.query(BoardGame).filter(BoardGame.bgg_id == game.bgg_id).first()
    if existing:
        logger.info("Game %s (%s) already in catalog", game.name, game.bgg_id)
        return existing, False
    row = BoardGame(**game.to_model_fields())
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Imported game %s (%s)", game.name, game.bgg_id)
    return row, True


def import_games_by_name(
    db: Session,
    client: BggClient,
    names: list[str],
    *,
    delay_seconds: float = BGG_REQUEST_DELAY_SECONDS,
) -> dict[str, list[str]]:
    """
    Resolve each name with an exact BGG search and import the first hit.
    Duplicate names are processed once. One failure does not stop the batch.
    Returns {"imported": [...], "existing": [...], "not_found": [...], "failed": [...]}.
    """
    report: dict[str, list[str]] = {"imported": [], "existing": [], "not_found": [], "failed": []}
    unique_names = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
    for i, name in enumerate(unique_names):
        if i and delay_seconds > 0:
            # BGG throttles bursts
            time.sleep(delay_seconds)
        try:
            found = client.search(name, exact=True)
            if found.get("error"):
                raise RuntimeError(found["error"])
            if not found["ids"]:
                logger.info("Could not find BGG id for %s", name)
                report["not_found"].append(name)
                continue
            details = client.fetch_thing(found["ids"][0])
            if details.get("error"):
                raise RuntimeError(details["error"])
            _, created = import_game(db, details["game"])
            report["imported" if created else "existing"].append(name)
        except Exception as e:
            db.rollback()
            logger.error("Error processing %s: %s", name, e)
            report["failed"].append(name)
    return report


def _apply_game_fields(row: BoardGame, fields: dict[str, Any]) -> None:
    for column, value in fields.items():
        if column in LIST_GAME_FIELDS:
            setattr(row, column, json.dumps(list(value or [])))
        elif column in SCALAR_GAME_FIELDS:
            setattr(row, column, value)
        else:
            raise PartyFinderValidationError(f"Unknown game field: {column}")


def _get_game_row(db: Session, bgg_id: str) -> BoardGame:
    row = db.query(BoardGame).filter(BoardGame.bgg_id == bgg_id).first()
    if not row:
        raise NotFoundError("Game not found")
    return row


def create_game(db: Session, bgg_id: str, fields: dict[str, Any]) -> BoardGame:
    """Admin: add a game by hand. The BGG id must be new."""
    if not bgg_id or not str(bgg_id).strip():
        raise PartyFinderValidationError("BGG ID is required")
    if not fields.get("name"):
        raise PartyFinderValidationError("Game name is required")
    if db.query(BoardGame.id).filter(BoardGame.bgg_id == bgg_id).first():
        raise PartyFinderValidationError(f"Game {bgg_id} already exists")
    row = BoardGame(bgg_id=bgg_id, is_starred=False)
    _apply_game_fields(row, {attr: [] for attr in LIST_GAME_FIELDS} | fields)
    try:
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.info("Created game %s (%s)", row.name, bgg_id)
    return row


def update_game(db: Session, bgg_id: str, changes: dict[str, Any]) -> BoardGame:
    """Admin: change the given fields only (star, admin note, details)."""
    if "name" in changes and not changes["name"]:
        raise PartyFinderValidationError("Game name cannot be empty")
    row = _get_game_row(db, bgg_id)
    _apply_game_fields(row, changes)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.info("Updated game %s: %s", bgg_id, sorted(changes))
    return row


def delete_game(db: Session, bgg_id: str) -> dict[str, Any]:
    """Admin: remove a game with its comments and every player's preference for it."""
    row = _get_game_row(db, bgg_id)
    deleted = game_to_dict(row)
    try:
        db.query(UserGamePreference).filter(UserGamePreference.game_bgg_id == bgg_id).delete(
            synchronize_session=False
        )
        db.query(GameComment).filter(GameComment.game_bgg_id == bgg_id).delete(synchronize_session=False)
        db.delete(row)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted game %s (%s)", deleted["name"], bgg_id)
    return deleted
