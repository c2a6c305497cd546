# wikiportraits/core/domain/entity_builders.py
"""
Wikibase JSON for the items the uploader creates (wbeditentity new=item)
and for single claim values (wbcreateclaim).
"""
import re
from typing import Any, Dict, List

from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.exceptions import InvalidRequestError
from wikiportraits.core.domain.models import EntityType, PendingEntity

TIME_PROPERTIES = frozenset({"P580", "P582", "P585", "P571", "P576"})
_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

PRECISION_YEAR = 9
PRECISION_DAY = 11


def item_value(qid: str) -> Dict[str, Any]:
    return {"entity-type": "item", "id": qid}


def time_value(iso_day: str, precision: int = PRECISION_DAY) -> Dict[str, Any]:
    time = iso_day if iso_day.startswith("+") else f"+{iso_day}T00:00:00Z"
    return {
        "time": time,
        "timezone": 0,
        "before": 0,
        "after": 0,
        "precision": precision,
        "calendarmodel": wd.Q_GREGORIAN_CALENDAR,
    }


def format_claim_value(property_id: str, value: Any) -> Any:
    """
    Turns a form value into a wbcreateclaim datavalue:
    YYYY-MM-DD on a time property -> time value, "Q..." -> item, anything else as is.
    """
    if isinstance(value, str):
        if property_id in TIME_PROPERTIES and _ISO_DAY.match(value):
            return time_value(value)
        if value.startswith("Q"):
            return item_value(value)
    return value


def _statement(prop: str, datavalue: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "mainsnak": {"snaktype": "value", "property": prop, "datavalue": datavalue},
        "type": "statement",
        "rank": "normal",
    }


def item_statement(prop: str, qid: str) -> Dict[str, Any]:
    return _statement(prop, {"value": item_value(qid), "type": "wikibase-entityid"})


def string_statement(prop: str, value: str) -> Dict[str, Any]:
    return _statement(prop, {"value": value, "type": "string"})


def time_statement(prop: str, iso_day: str, precision: int) -> Dict[str, Any]:
    return _statement(prop, {"value": time_value(iso_day, precision), "type": "time"})


def _terms(name: str, description: str) -> Dict[str, Any]:
    return {
        "labels": {"en": {"language": "en", "value": name}},
        "descriptions": {"en": {"language": "en", "value": description}},
    }


def build_band(entity: PendingEntity) -> Dict[str, Any]:
    data = _terms(entity.name, entity.description or f"{entity.name} is a band")
    data["claims"] = {wd.P_INSTANCE_OF: [item_statement(wd.P_INSTANCE_OF, wd.Q_MUSICAL_GROUP)]}
    return data


def build_band_member(entity: PendingEntity) -> Dict[str, Any]:
    member = entity.data
    data = _terms(entity.name, entity.description or f"{entity.name} is a musician")
    if member.get("legalName"):
        data["aliases"] = {"en": [{"language": "en", "value": member["legalName"]}]}

    claims: Dict[str, List[Dict[str, Any]]] = {
        wd.P_INSTANCE_OF: [item_statement(wd.P_INSTANCE_OF, wd.Q_HUMAN)],
        wd.P_SEX_OR_GENDER: [item_statement(wd.P_SEX_OR_GENDER, wd.gender_qid(member.get("gender")))],
        wd.P_OCCUPATION: [item_statement(wd.P_OCCUPATION, wd.Q_MUSICIAN)],
    }
    instruments = member.get("instruments") or []
    if instruments:
        claims[wd.P_INSTRUMENT] = [item_statement(wd.P_INSTRUMENT, wd.instrument_qid(i)) for i in instruments]
    band_id = member.get("bandId")
    # Bands still waiting to be created have no QID yet
    if band_id and not band_id.startswith("pending-"):
        claims[wd.P_MEMBER_OF] = [item_statement(wd.P_MEMBER_OF, band_id)]
    if member.get("nationality"):
        claims[wd.P_COUNTRY_OF_CITIZENSHIP] = [
            item_statement(wd.P_COUNTRY_OF_CITIZENSHIP, wd.country_qid(member["nationality"]))
        ]
    if member.get("birthDate"):
        claims[wd.P_DATE_OF_BIRTH] = [time_statement(wd.P_DATE_OF_BIRTH, member["birthDate"], PRECISION_YEAR)]

    data["claims"] = claims
    return data


def build_photographer(entity: PendingEntity) -> Dict[str, Any]:
    person = entity.data
    data = _terms(entity.name, entity.description or f"{entity.name} is a photographer")
    claims: Dict[str, List[Dict[str, Any]]] = {
        wd.P_INSTANCE_OF: [item_statement(wd.P_INSTANCE_OF, wd.Q_HUMAN)],
        wd.P_OCCUPATION: [item_statement(wd.P_OCCUPATION, wd.Q_PHOTOGRAPHER)],
        wd.P_SEX_OR_GENDER: [item_statement(wd.P_SEX_OR_GENDER, wd.gender_qid(person.get("gender")))],
    }
    if person.get("nationality"):
        claims[wd.P_COUNTRY_OF_CITIZENSHIP] = [
            item_statement(wd.P_COUNTRY_OF_CITIZENSHIP, wd.country_qid(person["nationality"]))
        ]
    if person.get("wikimediaUsername"):
        claims[wd.P_WIKIMEDIA_USERNAME] = [string_statement(wd.P_WIKIMEDIA_USERNAME, person["wikimediaUsername"])]
    if person.get("website"):
        claims[wd.P_OFFICIAL_WEBSITE] = [string_statement(wd.P_OFFICIAL_WEBSITE, person["website"])]

    data["claims"] = claims
    return data


_BUILDERS = {
    EntityType.BAND.value: build_band,
    EntityType.BAND_MEMBER.value: build_band_member,
    EntityType.PHOTOGRAPHER.value: build_photographer,
}

_TYPE_LABELS = {
    EntityType.BAND.value: "Band",
    EntityType.BAND_MEMBER.value: "Band member",
    EntityType.PHOTOGRAPHER.value: "Photographer",
}


def validate_entity(entity: PendingEntity) -> None:
    if not entity.name or not entity.name.strip():
        raise InvalidRequestError("Entity name is required")
    if entity.type not in _BUILDERS:
        raise InvalidRequestError("Invalid entity type")


def build_entity(entity: PendingEntity) -> Dict[str, Any]:
    validate_entity(entity)
    return _BUILDERS[entity.type](entity)


def creation_message(entity: PendingEntity) -> str:
    return f'{_TYPE_LABELS[entity.type]} "{entity.name}" created successfully on wikidata.org'
