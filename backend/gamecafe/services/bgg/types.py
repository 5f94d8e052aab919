"""BoardGameGeek XML API responses parsed into plain records."""
import html
import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any

LINK_TYPES = {
    "categories": "boardgamecategory",
    "mechanics": "boardgamemechanic",
    "designers": "boardgamedesigner",
    "artists": "boardgameartist",
    "publishers": "boardgamepublisher",
}


@dataclass
class BggGame:
    bgg_id: str
    name: str
    year_published: int | None = None
    min_players: int | None = None
    max_players: int | None = None
    playing_time: int | None = None
    min_play_time: int | None = None
    max_play_time: int | None = None
    age: int | None = None
    description: str | None = None
    thumbnail: str | None = None
    image: str | None = None
    categories: list[str] = field(default_factory=list)
    mechanics: list[str] = field(default_factory=list)
    designers: list[str] = field(default_factory=list)
    artists: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    average_rating: float | None = None
    num_ratings: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.bgg_id,
            "name": self.name,
            "yearPublished": self.year_published,
            "minPlayers": self.min_players,
            "maxPlayers": self.max_players,
            "playingTime": self.playing_time,
            "minPlayTime": self.min_play_time,
            "maxPlayTime": self.max_play_time,
            "minAge": self.age,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "image": self.image,
            "categories": self.categories,
            "mechanics": self.mechanics,
            "designers": self.designers,
            "artists": self.artists,
            "publishers": self.publishers,
            "averageRating": self.average_rating,
            "numRatings": self.num_ratings,
        }

    def to_model_fields(self) -> dict[str, Any]:
        """Column values for gamecafe.models.BoardGame (list fields JSON-encoded)."""
        return {
            "bgg_id": self.bgg_id,
            "name": self.name,
            "year_published": self.year_published,
            "min_players": self.min_players,
            "max_players": self.max_players,
            "playing_time": self.playing_time,
            "min_play_time": self.min_play_time,
            "max_play_time": self.max_play_time,
            "age": self.age,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "image": self.image,
            **{attr: json.dumps(getattr(self, attr)) for attr in LINK_TYPES},
        }


def _value_attr(item: ET.Element, tag: str) -> str | None:
    el = item.find(tag)
    if el is None:
        return None
    value = el.get("value")
    return value if value not in (None, "") else None


def _int_attr(item: ET.Element, tag: str) -> int | None:
    raw = _value_attr(item, tag)
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


def _text(item: ET.Element, tag: str) -> str | None:
    el = item.find(tag)
    if el is None or el.text is None:
        return None
    # BGG double-escapes entities in descriptions (&amp;#10;)
    return html.unescape(el.text).strip() or None


def parse_search_ids(xml_text: str) -> list[str]:
    root = ET.fromstring(xml_text)
    return [item.get("id") for item in root.findall("item") if item.get("id")]


def parse_thing(xml_text: str) -> BggGame | None:
    """Parse /thing?id=... into a BggGame; None when the response has no item."""
    root = ET.fromstring(xml_text)
    item = root.find("item")
    if item is None:
        return None
    name_el = item.find("name[@type='primary']")
    if name_el is None:
        name_el = item.find("name")
    links: dict[str, list[str]] = {attr: [] for attr in LINK_TYPES}
    for link in item.findall("link"):
        for attr, link_type in LINK_TYPES.items():
            if link.get("type") == link_type and link.get("value"):
                links[attr].append(link.get("value"))
    ratings = item.find("statistics/ratings")
    average = None
    num_ratings = None
    if ratings is not None:
        raw_avg = _value_attr(ratings, "average")
        try:
            average = float(raw_avg) if raw_avg is not None else None
        except ValueError:
            average = None
        num_ratings = _int_attr(ratings, "usersrated")
    return BggGame(
        bgg_id=item.get("id") or "",
        name=(name_el.get("value") if name_el is not None else None) or "",
        year_published=_int_attr(item, "yearpublished"),
        min_players=_int_attr(item, "minplayers"),
        max_players=_int_attr(item, "maxplayers"),
        playing_time=_int_attr(item, "playingtime"),
        min_play_time=_int_attr(item, "minplaytime"),
        max_play_time=_int_attr(item, "maxplaytime"),
        age=_int_attr(item, "minage"),
        description=_text(item, "description"),
        thumbnail=_text(item, "thumbnail"),
        image=_text(item, "image"),
        average_rating=average,
        num_ratings=num_ratings,
        **links,
    )
