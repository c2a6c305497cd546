# wikiportraits/core/domain/wikidata.py
"""
Accessors over raw Wikidata entity JSON (as returned by wbgetentities)
plus the QID lookup tables shared by the category and entity modules.
"""
import re
from typing import Any, Dict, List, Optional

QID_PATTERN = re.compile(r"Q\d+")

# --- Properties ---

P_INSTANCE_OF = "P31"
P_SEX_OR_GENDER = "P21"
P_COUNTRY = "P17"
P_COUNTRY_OF_CITIZENSHIP = "P27"
P_OCCUPATION = "P106"
P_GENRE = "P136"
P_IMAGE = "P18"
P_DEPICTS = "P180"
P_COMMONS_CATEGORY = "P373"
P_MEMBER_OF = "P463"
P_HAS_PART = "P527"
P_MUSICBRAINZ_ARTIST = "P434"
P_INCEPTION = "P571"
P_START_TIME = "P580"
P_POINT_IN_TIME = "P585"
P_INSTRUMENT = "P1303"
P_WIKIMEDIA_USERNAME = "P4174"
P_OFFICIAL_WEBSITE = "P856"
P_DATE_OF_BIRTH = "P569"

# --- Items ---

Q_HUMAN = "Q5"
Q_MUSICAL_GROUP = "Q215380"
Q_MUSICAL_ENSEMBLE = "Q2088357"
Q_BAND = "Q215627"
Q_MUSICIAN = "Q639669"
Q_PHOTOGRAPHER = "Q33231"
Q_MUSIC_FESTIVAL = "Q132241"
Q_CONCERT = "Q182832"
Q_ASSOCIATION_FOOTBALL_MATCH = "Q16466"
Q_UNKNOWN_GENDER = "Q48277"
Q_GREGORIAN_CALENDAR = "http://www.wikidata.org/entity/Q1985727"

PHOTOGRAPHER_OCCUPATIONS = frozenset({
    "Q33231",    # photographer
    "Q1930187",  # journalist
    "Q33216",    # photojournalist
    "Q222344",   # cinematographer
    "Q1925963",  # graphic designer
    "Q2526255",  # film director
})

OCCUPATION_LABELS = {
    "Q177220": "singer",
    "Q855091": "guitarist",
    "Q765778": "bassist",
    "Q386854": "drummer",
    "Q2252262": "keyboardist",
    "Q36834": "composer",
    "Q639669": "musician",
    "Q10800557": "singer-songwriter",
    "Q488205": "singer-songwriter",
    "Q2643890": "music producer",
    "Q222722": "conductor",
    "Q1414443": "vocalist",
}

NATIONALITY_ADJECTIVES = {
    "Q20": "Norwegian",
    "Q30": "American",
    "Q145": "British",
    "Q183": "German",
    "Q142": "French",
    "Q38": "Italian",
    "Q29": "Spanish",
    "Q96": "Mexican",
    "Q16": "Canadian",
    "Q408": "Australian",
    "Q31": "Belgian",
    "Q55": "Dutch",
    "Q34": "Swedish",
    "Q35": "Danish",
    "Q33": "Finnish",
    "Q39": "Swiss",
    "Q40": "Austrian",
    "Q155": "Brazilian",
    "Q159": "Russian",
    "Q17": "Japanese",
    "Q148": "Chinese",
    "Q884": "South Korean",
    "Q668": "Indian",
}

COUNTRY_QIDS = {
    "norway": "Q20",
    "sweden": "Q34",
    "denmark": "Q35",
    "finland": "Q33",
    "iceland": "Q189",
    "germany": "Q183",
    "france": "Q142",
    "united kingdom": "Q145",
    "uk": "Q145",
    "united states": "Q30",
    "usa": "Q30",
    "canada": "Q16",
    "australia": "Q408",
    "japan": "Q17",
    "south korea": "Q884",
    "china": "Q148",
    "russia": "Q159",
    "italy": "Q38",
    "spain": "Q29",
    "netherlands": "Q55",
    "belgium": "Q31",
    "austria": "Q40",
    "switzerland": "Q39",
    "poland": "Q36",
    "brazil": "Q155",
    "argentina": "Q414",
    "mexico": "Q96",
    "india": "Q668",
}
DEFAULT_COUNTRY_QID = "Q6256"  # country

GENDER_QIDS = {
    "male": "Q6581097",
    "female": "Q6581072",
    "non-binary gender": "Q48270",
    "trans man": "Q2449503",
    "trans woman": "Q1052281",
    "unknown": Q_UNKNOWN_GENDER,
}

INSTRUMENT_QIDS = {
    "guitar": "Q6607",
    "bass": "Q46185",
    "vocals": "Q27939",
    "drums": "Q128309",
    "piano": "Q5994",
    "keyboard": "Q52954",
}
DEFAULT_INSTRUMENT_QID = "Q34379"  # musical instrument


def is_qid(value: Any) -> bool:
    return isinstance(value, str) and QID_PATTERN.fullmatch(value) is not None


def country_qid(country: str) -> str:
    return COUNTRY_QIDS.get(country.lower(), DEFAULT_COUNTRY_QID)


def gender_qid(gender: Optional[str]) -> str:
    return GENDER_QIDS.get(gender or "", Q_UNKNOWN_GENDER)


def instrument_qid(instrument: str) -> str:
    return INSTRUMENT_QIDS.get(instrument.lower(), DEFAULT_INSTRUMENT_QID)


# --- Entity accessors ---


def label(entity: Dict[str, Any], lang: str = "en") -> Optional[str]:
    labels = entity.get("labels") or {}
    chosen = labels.get(lang) or labels.get("en")
    return chosen.get("value") if chosen else None


def description(entity: Dict[str, Any], lang: str = "en") -> Optional[str]:
    descriptions = entity.get("descriptions") or {}
    chosen = descriptions.get(lang) or descriptions.get("en")
    return chosen.get("value") if chosen else None


def aliases(entity: Dict[str, Any], lang: str = "en") -> List[str]:
    return [a.get("value") for a in (entity.get("aliases") or {}).get(lang, []) if a.get("value")]


def claim_values(entity: Dict[str, Any], prop: str) -> List[Any]:
    """Raw datavalue values of every statement for `prop`."""
    values = []
    for claim in (entity.get("claims") or {}).get(prop, []):
        value = ((claim.get("mainsnak") or {}).get("datavalue") or {}).get("value")
        if value is not None:
            values.append(value)
    return values


def first_claim_value(entity: Dict[str, Any], prop: str) -> Any:
    values = claim_values(entity, prop)
    return values[0] if values else None


def item_ids(entity: Dict[str, Any], prop: str) -> List[str]:
    """QIDs referenced by an item-valued property."""
    return [v["id"] for v in claim_values(entity, prop) if isinstance(v, dict) and v.get("id")]


def time_year(entity: Dict[str, Any], prop: str) -> Optional[str]:
    """Year of the first time-valued statement ("+1994-00-00T00:00:00Z" -> "1994")."""
    value = first_claim_value(entity, prop)
    if isinstance(value, dict) and value.get("time"):
        return value["time"].lstrip("+")[:4]
    return None


def is_human(entity: Dict[str, Any]) -> bool:
    return Q_HUMAN in item_ids(entity, P_INSTANCE_OF)


def sitelink_url(entity: Dict[str, Any], site: str = "enwiki") -> Optional[str]:
    link = (entity.get("sitelinks") or {}).get(site)
    if not link:
        return None
    if link.get("url"):
        return link["url"]
    lang = site[:-4] if site.endswith("wiki") else "en"
    return f"https://{lang}.wikipedia.org/wiki/{link['title'].replace(' ', '_')}"


def entity_url(entity_id: str) -> str:
    return f"https://www.wikidata.org/wiki/{entity_id}"


def concept_uri(entity_id: str) -> str:
    return f"http://www.wikidata.org/entity/{entity_id}"
