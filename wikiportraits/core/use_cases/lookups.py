# wikiportraits/core/use_cases/lookups.py
"""
Read-side use cases behind the search/lookup endpoints: they fetch from a
gateway and reshape the raw Wikibase/MediaWiki JSON for the client.
"""
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import structlog

from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.exceptions import DomainError, EntityNotFoundError, InvalidRequestError
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.core.ports.wikipedia_gateway import IWikipediaGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

MAX_SEARCH_LIMIT = 50

# Country QIDs the artist search can name, with the matching Wikipedia language
ARTIST_COUNTRIES = {
    "Q20": ("Norway", "no"),
    "Q34": ("Sweden", "sv"),
    "Q35": ("Denmark", "da"),
    "Q183": ("Germany", "de"),
    "Q142": ("France", "fr"),
    "Q30": ("United States", "en"),
    "Q145": ("United Kingdom", "en"),
}

MUSIC_ENTITY_TYPES = {
    wd.Q_HUMAN: "person",
    wd.Q_MUSICAL_GROUP: "group",
    wd.Q_MUSICAL_ENSEMBLE: "group",
    wd.Q_MUSICIAN: "person",
}

_MUSIC_WORDS = re.compile(r"band|music|singer|artist|album|song", re.IGNORECASE)


def is_photographer(entity: Dict[str, Any]) -> bool:
    return any(q in wd.PHOTOGRAPHER_OCCUPATIONS for q in wd.item_ids(entity, wd.P_OCCUPATION))


def entity_summary(entity: Dict[str, Any], lang: str = "en") -> Dict[str, Any]:
    """The compact entity card shown in search results and lookups."""
    entity_id = entity["id"]
    summary: Dict[str, Any] = {
        "id": entity_id,
        "label": wd.label(entity, lang) or entity_id,
        "conceptUri": wd.concept_uri(entity_id),
        "url": wd.entity_url(entity_id),
        "isHuman": wd.is_human(entity),
        "isPhotographer": is_photographer(entity),
    }
    description = wd.description(entity, lang)
    if description:
        summary["description"] = description
    aliases = wd.aliases(entity, lang)
    if aliases:
        summary["aliases"] = aliases
    return summary


def _wikipedia_url(entity: Dict[str, Any], language: str) -> Optional[str]:
    sitelinks = entity.get("sitelinks") or {}
    for lang in (language, "en"):
        link = sitelinks.get(f"{lang}wiki")
        if link:
            return f"https://{lang}.wikipedia.org/wiki/{quote(link['title'])}"
    return None


def artist_result(entity: Dict[str, Any], language: str) -> Optional[Dict[str, Any]]:
    """
    Artist card, or None when the item is clearly not music related.
    Items without a description are kept for manual review.
    """
    entity_id = entity["id"]
    name = wd.label(entity, language) or wd.label(entity, "en") or entity_id
    description = wd.description(entity, language) or wd.description(entity, "en")

    types = wd.item_ids(entity, wd.P_INSTANCE_OF)
    is_music = any(t in MUSIC_ENTITY_TYPES for t in types)
    entity_type = next((MUSIC_ENTITY_TYPES[t] for t in types if t in MUSIC_ENTITY_TYPES), "unknown")

    if not (is_music or not description or _MUSIC_WORDS.search(description)):
        return None

    result: Dict[str, Any] = {
        "id": entity_id,
        "name": name,
        "description": description,
        "wikidataUrl": wd.entity_url(entity_id),
        "isMusicRelated": is_music,
        "entityType": entity_type,
    }
    country_id = next(iter(wd.item_ids(entity, wd.P_COUNTRY)), None)
    if country_id in ARTIST_COUNTRIES:
        result["country"], result["countryCode"] = ARTIST_COUNTRIES[country_id]
    musicbrainz = wd.first_claim_value(entity, wd.P_MUSICBRAINZ_ARTIST)
    if musicbrainz:
        result["musicbrainzId"] = musicbrainz
    formed = wd.time_year(entity, wd.P_INCEPTION)
    if formed:
        result["formedYear"] = formed
    wikipedia_url = _wikipedia_url(entity, language)
    if wikipedia_url:
        result["wikipediaUrl"] = wikipedia_url
    return result


class SearchWikidata:
    """Use Case: Free-text item search returning entity cards."""

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, query: str, limit: int = 10) -> Dict[str, Any]:
        query = (query or "").strip()
        if not query:
            raise InvalidRequestError("Query parameter is required")
        limit = min(limit, MAX_SEARCH_LIMIT)

        with tracer.start_as_current_span("use_case.search_wikidata") as span:
            span.set_attribute("app.query", query)
            try:
                # Over-fetch: some hits drop out once the full entities are read
                hits = await self.wikidata.search_entities(query, limit=limit * 2)
                if not hits:
                    return {"results": [], "total": 0}

                entities = await self.wikidata.get_entities(
                    [h["id"] for h in hits], props="labels|descriptions|claims|aliases"
                )
                results = [entity_summary(entities[h["id"]]) for h in hits if h["id"] in entities][:limit]
                return {"results": results, "total": len(results)}

            except DomainError:
                raise
            except Exception as e:
                logger.error("wikidata_search_failed", query=query, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected search failure: {str(e)}")


class GetEntitySummary:
    """Use Case: One item as an entity card."""

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, entity_id: str) -> Dict[str, Any]:
        if not entity_id or not re.fullmatch(r"[QPL]\d+", entity_id):
            raise InvalidRequestError("A valid entity id (e.g. Q42) is required")

        entity = await self.wikidata.get_entity(entity_id)
        if not entity:
            raise EntityNotFoundError(entity_id)
        return entity_summary(entity)


class SearchArtists:
    """
    Use Case: Wikidata search narrowed to musicians and bands.
    Music-related items (human, musician, musical group/ensemble) sort first.
    """

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, query: str, language: str = "en", limit: int = 10) -> Dict[str, Any]:
        if not query:
            raise InvalidRequestError("Query parameter is required")

        with tracer.start_as_current_span("use_case.search_artists") as span:
            span.set_attribute("app.query", query)
            try:
                hits = await self.wikidata.search_entities(query, limit=limit * 2, language=language)
                response = {"query": query, "language": language, "results": [], "source": "wikidata"}
                if not hits:
                    return response

                ids = [h["id"] for h in hits][:limit]
                entities = await self.wikidata.get_entities(
                    ids, props="labels|descriptions|claims|sitelinks", languages=f"{language}|en"
                )

                results: List[Dict[str, Any]] = []
                for entity_id in ids:
                    entity = entities.get(entity_id)
                    card = artist_result(entity, language) if entity else None
                    if card:
                        results.append(card)

                # Stable: keeps search relevance inside each group
                results.sort(key=lambda r: not r["isMusicRelated"])
                response["results"] = results[:limit]
                response["total"] = len(results)
                return response

            except DomainError:
                raise
            except Exception as e:
                logger.error("artist_search_failed", query=query, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected artist search failure: {str(e)}")


class SearchWikipedia:
    """
    Use Case: Title search on Wikipedia.

    With ``category="teams"`` the first five hits are checked against their
    categories and only football clubs are kept, unless none match.
    """

    TEAM_CHECK_LIMIT = 5

    def __init__(self, wikipedia: IWikipediaGateway):
        self.wikipedia = wikipedia

    async def execute(self, query: str, category: str = "football", limit: int = 10, lang: str = "en") -> Dict[str, Any]:
        if not query:
            raise InvalidRequestError("Query parameter is required")

        try:
            hits = await self.wikipedia.opensearch(query, limit=limit, lang=lang)
            results = [
                {
                    "id": h["title"].replace(" ", "_"),
                    "title": h["title"],
                    "description": h.get("description") or "",
                    "url": h.get("url") or "",
                    "wikipedia_url": h.get("url") or "",
                }
                for h in hits
            ]

            if category == "teams" and results:
                results = await self._only_teams(results, lang)

            return {"query": query, "results": results}

        except DomainError:
            raise
        except Exception as e:
            logger.error("wikipedia_search_failed", query=query, error=str(e), exc_info=True)
            raise DomainError(f"Unexpected Wikipedia search failure: {str(e)}")

    async def _only_teams(self, results: List[Dict[str, Any]], lang: str) -> List[Dict[str, Any]]:
        checked = results[:self.TEAM_CHECK_LIMIT]
        summaries = await self.wikipedia.get_page_summaries([r["title"] for r in checked], lang=lang)

        enhanced = []
        for result in checked:
            summary = summaries.get(result["title"])
            if summary is None:
                enhanced.append(result)
                continue
            is_team = any(
                "football" in c.lower() or "soccer" in c.lower() for c in summary["categories"]
            )
            extract = summary["extract"]
            enhanced.append({
                **result,
                "isFootballTeam": is_team,
                "extract": f"{extract[:200]}..." if extract else result["description"],
            })

        teams = [r for r in enhanced if r.get("isFootballTeam") is not False]
        return teams or results


def band_member(entity: Dict[str, Any]) -> Dict[str, Any]:
    """Member card for the band-performers step. Instruments and nationality stay as QIDs."""
    entity_id = entity["id"]
    member: Dict[str, Any] = {
        "id": entity_id,
        "name": wd.label(entity) or entity_id,
        "wikidataUrl": wd.entity_url(entity_id),
    }
    enwiki = (entity.get("sitelinks") or {}).get("enwiki")
    if enwiki:
        member["wikipediaUrl"] = f"https://en.wikipedia.org/wiki/{quote(enwiki['title'])}"
    instruments = wd.item_ids(entity, wd.P_INSTRUMENT)
    if instruments:
        member["instruments"] = instruments
    born = wd.time_year(entity, wd.P_DATE_OF_BIRTH)
    if born:
        member["birthDate"] = born
    nationality = next(iter(wd.item_ids(entity, wd.P_COUNTRY_OF_CITIZENSHIP)), None)
    if nationality:
        member["nationality"] = nationality
    image = wd.first_claim_value(entity, wd.P_IMAGE)
    if image:
        member["imageUrl"] = f"https://commons.wikimedia.org/wiki/Special:FilePath/{quote(image)}"
    return member


class GetBandMembers:
    """
    Use Case: Members of a band, looked up by QID or by name.

    The band's own "has part" (P527) list is used when present. Otherwise
    humans whose "member of" (P463) points at the band are collected.
    """

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, band_id: Optional[str] = None, band_name: Optional[str] = None) -> Dict[str, Any]:
        if not band_id and not band_name:
            raise InvalidRequestError("Band ID or name is required")
        if band_id and not wd.is_qid(band_id):
            raise InvalidRequestError(f"Invalid band id: {band_id}")

        with tracer.start_as_current_span("use_case.get_band_members") as span:
            try:
                if not band_id:
                    hits = await self.wikidata.search_entities(band_name, limit=1)
                    if not hits:
                        return {"members": []}
                    band_id = hits[0]["id"]
                span.set_attribute("app.band_id", band_id)

                bands = await self.wikidata.get_entities([band_id], props="claims|labels")
                band = bands.get(band_id)
                if not band:
                    return {"members": []}

                member_ids = wd.item_ids(band, wd.P_HAS_PART)
                reverse = not member_ids
                if reverse:
                    member_ids = await self.wikidata.search_by_statement(wd.P_MEMBER_OF, band_id)
                if not member_ids:
                    return {"members": []}

                entities = await self.wikidata.get_entities(
                    member_ids, props="labels|descriptions|claims|sitelinks"
                )
                members = [band_member(entities[i]) for i in member_ids if i in entities]
                if reverse:
                    members = [m for m in members if wd.is_human(entities[m["id"]])]
                    members.sort(key=lambda m: m["name"].lower())

                logger.info("band_members_found", band_id=band_id, count=len(members), via="P463" if reverse else "P527")
                return {"members": members}

            except DomainError:
                raise
            except Exception as e:
                logger.error("band_members_failed", band_id=band_id, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected band member lookup failure: {str(e)}")


def _article(title: str, team: str, **extra: str) -> Dict[str, Any]:
    return {
        "id": title.replace(" ", "_"),
        "name": title,
        "wikipedia_title": title,
        "wikipedia_url": f"https://en.wikipedia.org/wiki/{quote(title)}",
        "team": team,
        **extra,
    }


class SearchTeamPlayers:
    """
    Use Case: Squad lookup for the soccer workflow.

    Players come from the team article's player categories (the first three).
    When those are empty, squad and roster searches are tried, then a plain
    player search with stadium, season and club pages filtered out.
    """

    PLAYER_CATEGORY_WORDS = (
        "players", "footballers", "squad", "association football people",
    )
    CATEGORY_LIMIT = 3
    SQUAD_SEARCHES = (
        "{team} current squad",
        "{team} players",
        "{team} roster",
        "{team} first team",
        "List of {team} players",
    )
    NOT_PLAYERS = ("stadium", "season", "f.c.", "fc ", "club")

    def __init__(self, wikipedia: IWikipediaGateway):
        self.wikipedia = wikipedia

    async def execute(self, team: str, limit: int = 30) -> Dict[str, Any]:
        team = (team or "").strip()
        if not team:
            raise InvalidRequestError("Team parameter is required")

        with tracer.start_as_current_span("use_case.search_team_players") as span:
            span.set_attribute("app.team", team)
            try:
                summaries = await self.wikipedia.get_page_summaries([team])
                page = next(iter(summaries.values()), None)
                if page is None:
                    raise EntityNotFoundError(team, kind="Team")

                categories = [
                    c for c in page["categories"]
                    if any(word in c.lower() for word in self.PLAYER_CATEGORY_WORDS)
                ]
                if not categories:
                    categories = [
                        f"Category:{team} players",
                        f"Category:{team} footballers",
                        f"Category:{team} F.C. players",
                        f"Category:{team} FC players",
                        f"Category:{team} current squad",
                        f"Category:{team} current players",
                    ]

                players: List[Dict[str, Any]] = []
                seen = set()
                for category in categories[:self.CATEGORY_LIMIT]:
                    titles = await self.wikipedia.get_category_members(category, limit=min(limit, 100))
                    for title in titles:
                        if title not in seen:
                            seen.add(title)
                            players.append(_article(title, team, category=category))
                players = players[:limit]

                if not players:
                    players = await self._search_players(team)

                return {
                    "team": team,
                    "players": players,
                    "total": len(players),
                    "categories_found": categories,
                }

            except DomainError:
                raise
            except Exception as e:
                logger.error("team_players_failed", team=team, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected team player lookup failure: {str(e)}")

    async def _search_players(self, team: str) -> List[Dict[str, Any]]:
        for pattern in self.SQUAD_SEARCHES:
            hits = await self.wikipedia.opensearch(pattern.format(team=team), limit=10)
            if hits:
                return [_article(h["title"], team, source="squad_search") for h in hits[:5]]

        hits = await self.wikipedia.opensearch(f"{team} footballer player", limit=15)
        titles = [
            h["title"] for h in hits
            if not any(word in h["title"].lower() for word in self.NOT_PLAYERS)
        ]
        return [_article(title, team, source="player_search") for title in titles[:10]]


class SearchMusicArticles:
    """
    Use Case: Wikipedia title search for musicians and bands.

    The first eight hits are checked against their categories and intro text.
    Music-related hits are returned when there are any, otherwise all checked hits.
    """

    LANGUAGES = ("en", "no", "nb", "nn", "da", "sv", "de", "fr", "es", "it", "nl", "pl", "ru")
    CHECK_LIMIT = 8
    MUSIC_CATEGORY_WORDS = (
        "music", "band", "singer", "musician", "artist", "rock", "pop", "jazz",
        "classical", "electronic", "folk", "country", "hip hop", "metal",
        "alternative", "indie",
    )
    MUSIC_TEXT = re.compile(
        r"\b(band|singer|musician|artist|album|song|music|guitar|vocalist|drummer|bassist|keyboard)\b",
        re.IGNORECASE,
    )

    def __init__(self, wikipedia: IWikipediaGateway):
        self.wikipedia = wikipedia

    def is_music_related(self, summary: Dict[str, Any]) -> bool:
        by_category = any(
            word in category.lower()
            for category in summary["categories"]
            for word in self.MUSIC_CATEGORY_WORDS
        )
        return by_category or bool(self.MUSIC_TEXT.search(summary["extract"]))

    async def execute(self, query: str, lang: str = "en", limit: int = 10) -> Dict[str, Any]:
        if not query:
            raise InvalidRequestError("Query parameter is required")
        if lang not in self.LANGUAGES:
            lang = "en"

        with tracer.start_as_current_span("use_case.search_music_articles") as span:
            span.set_attribute("app.query", query)
            try:
                hits = await self.wikipedia.opensearch(query, limit=limit, lang=lang)
                results = [
                    {
                        "id": h["title"].replace(" ", "_"),
                        "title": h["title"],
                        "description": h.get("description") or "",
                        "url": h.get("url") or "",
                        "wikipedia_url": h.get("url") or "",
                    }
                    for h in hits
                ]
                if not results:
                    return {"query": query, "language": lang, "results": []}

                checked = results[:self.CHECK_LIMIT]
                summaries = await self.wikipedia.get_page_summaries([r["title"] for r in checked], lang=lang)

                enhanced = []
                for result in checked:
                    summary = summaries.get(result["title"])
                    if summary is None:
                        enhanced.append({**result, "isMusicRelated": False})
                        continue
                    extract = summary["extract"]
                    enhanced.append({
                        **result,
                        "isMusicRelated": self.is_music_related(summary),
                        "extract": f"{extract[:200]}..." if extract else result["description"],
                        "categories": summary["categories"],
                    })

                music = [r for r in enhanced if r["isMusicRelated"]]
                return {"query": query, "language": lang, "results": music or enhanced}

            except DomainError:
                raise
            except Exception as e:
                logger.error("music_article_search_failed", query=query, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected music article search failure: {str(e)}")
