"""
Catalog API: browse games, game details with similar games, BoardGameGeek search and import,
and admin create/edit/delete.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from gamecafe.api.deps import get_cache, require_admin
from gamecafe.core.errors import PartyFinderError, to_http
from gamecafe.db.session import get_db
from gamecafe.models.user import User
from gamecafe.services.bgg import BggClient
from gamecafe.services.catalog_service import (
    create_game,
    delete_game,
    distinct_link_values,
    game_to_dict,
    get_game_with_similar,
    import_game,
    list_games,
    update_game,
)
from gamecafe.services.party_finder.cache import TTLCache, invalidate_directory_caches

router = APIRouter()
logger = logging.getLogger(__name__)


def get_bgg_client() -> BggClient:
    return BggClient()


@router.get("")
def browse_games(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    name: str | None = Query(None),
    duration: int | None = Query(None, ge=0),
    players: int | None = Query(None, ge=1),
    mechanics: str | None = Query(None, description="Comma-separated; any match"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Catalog page with filters (name, max duration, player count, mechanics) and sorting."""
    try:
        return list_games(
            db,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            name=name,
            duration=duration,
            players=players,
            mechanics=mechanics,
        )
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error executing catalog query: %s", e)
        raise HTTPException(status_code=500, detail="An error occurred while fetching games") from e


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)) -> list[str]:
    return distinct_link_values(db, "categories")


@router.get("/mechanics")
def list_mechanics(db: Session = Depends(get_db)) -> list[str]:
    return distinct_link_values(db, "mechanics")


@router.get("/bgg-search")
def bgg_search(
    query: str = Query(..., min_length=1),
    client: BggClient = Depends(get_bgg_client),
) -> list[dict[str, Any]]:
    """Search BoardGameGeek and return details for up to 10 hits."""
    result = client.search_with_details(query)
    if result.get("error"):
        logger.warning("BGG search failed for %r: %s", query, result["error"])
        raise HTTPException(status_code=502, detail=result["error"])
    return [g.to_dict() for g in result["games"]]


@router.post("/import/{bgg_id}")
def import_from_bgg(
    bgg_id: str,
    db: Session = Depends(get_db),
    client: BggClient = Depends(get_bgg_client),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """Admin: fetch one game from BoardGameGeek and add it to the catalog (skips existing ids)."""
    result = client.fetch_thing(bgg_id)
    if result.get("error"):
        raise HTTPException(status_code=502, detail=result["error"])
    row, created = import_game(db, result["game"])
    logger.info("Game %s import by %s: created=%s", bgg_id, admin.username, created)
    return {"created": created, "game": game_to_dict(row)}


@router.get("/{bgg_id}")
def get_game(bgg_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    """One game by BGG id plus up to 4 similar games (shared category)."""
    try:
        return get_game_with_similar(db, bgg_id)
    except PartyFinderError as e:
        raise to_http(e) from e


# --- Admin catalog management ---


class GameFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=255)
    year_published: int | None = Field(None, alias="yearPublished")
    min_players: int | None = Field(None, alias="minPlayers", ge=0)
    max_players: int | None = Field(None, alias="maxPlayers", ge=0)
    playing_time: int | None = Field(None, alias="playingTime", ge=0)
    min_play_time: int | None = Field(None, alias="minPlayTime", ge=0)
    max_play_time: int | None = Field(None, alias="maxPlayTime", ge=0)
    age: int | None = Field(None, ge=0)
    description: str | None = None
    thumbnail: str | None = None
    image: str | None = None
    categories: list[str] | None = None
    mechanics: list[str] | None = None
    designers: list[str] | None = None
    artists: list[str] | None = None
    publishers: list[str] | None = None
    is_starred: bool | None = Field(None, alias="isStarred")
    admin_note: str | None = Field(None, alias="adminNote")


class GameCreate(GameFields):
    bgg_id: str = Field(..., alias="bggId", min_length=1, max_length=32)


@router.post("", status_code=201)
def add_game(
    body: GameCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """Admin: add a game by hand (BGG id must be new)."""
    fields = body.model_dump(exclude_unset=True, exclude={"bgg_id"})
    if fields.get("is_starred") is None:
        fields.pop("is_starred", None)
    try:
        row = create_game(db, body.bgg_id, fields)
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error inserting game: %s", e)
        raise HTTPException(status_code=500, detail="Failed to insert game") from e
    return game_to_dict(row)


@router.put("/{bgg_id}")
def edit_game(
    bgg_id: str,
    body: GameFields,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """Admin: update the fields sent (star, admin note, details)."""
    changes = body.model_dump(exclude_unset=True)
    for required in ("name", "is_starred"):
        if required in changes and changes[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be null")
    try:
        row = update_game(db, bgg_id, changes)
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error updating game %s: %s", bgg_id, e)
        raise HTTPException(status_code=500, detail="Failed to update game") from e
    return game_to_dict(row)


@router.delete("/{bgg_id}")
def remove_game(
    bgg_id: str,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
    admin: User = Depends(require_admin),
) -> dict[str, Any]:
    """Admin: delete a game, its comments and players' preferences for it."""
    try:
        deleted = delete_game(db, bgg_id)
    except PartyFinderError as e:
        raise to_http(e) from e
    except Exception as e:
        logger.exception("Error deleting game %s: %s", bgg_id, e)
        raise HTTPException(status_code=500, detail="Failed to delete game") from e
    # Cached preference joins may still name the game
    invalidate_directory_caches(cache)
    logger.info("Game %s deleted by %s", bgg_id, admin.username)
    return {"message": "Game deleted successfully", "deletedGame": deleted}
