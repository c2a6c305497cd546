# wikiportraits/core/categories/generator.py
"""
Rule-driven category generation.

A rule is a template such as ``"Music festivals in {location}"`` plus a
dotted path into the form data (``"eventDetails.venue"``). The object
found at that path feeds the placeholders; ``{year}``, ``{location}``,
``{country}`` and ``{genre}`` have lookup fallbacks, any other key must be
a field of the object. A missing placeholder value means the rule yields
nothing.

Wikidata items attached to the form add their own categories: performers
through `get_performer_category`, festivals, concerts and bands through
their P31 types.
"""
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import structlog

from wikiportraits.core.categories.performer import get_performer_category, is_performer
from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.dates import year_of
from wikiportraits.core.domain.models import (
    CategoryGenerationResult,
    CategoryRuleType,
    GeneratedCategory,
)
from wikiportraits.core.ports.commons_gateway import ICommonsGateway

logger = structlog.get_logger()

HISTORY_LIMIT = 50
_PLACEHOLDER = re.compile(r"\{([^}]+)\}")
_YEAR_PATTERN = re.compile(r"\d{4}")
_DATE_FIELDS = ("date", "startDate", "endDate", "eventDate")


@dataclass
class CategoryRule:
    template: str
    source: str
    priority: int = 5
    type: CategoryRuleType = CategoryRuleType.AUTO
    condition: Optional[Callable[[Dict[str, Any]], bool]] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CategoryRule":
        """
        Builds a rule from JSON. A ``when`` dotted path turns into a
        condition that requires that form field to be set.
        """
        condition = None
        when = raw.get("when")
        if when:
            condition = lambda form, path=when: bool(resolve_path(form, path))  # noqa: E731
        return cls(
            template=raw["template"],
            source=raw["source"],
            priority=int(raw.get("priority", 5)),
            type=CategoryRuleType(raw.get("type", "auto")),
            condition=condition,
        )


@dataclass
class CategoryTemplate:
    id: str
    name: str
    template: str
    applicable_types: List[str]
    priority: int
    description: str = ""
    examples: List[str] = field(default_factory=list)


@dataclass
class CategoryPreferences:
    language: str = "en"
    include_year: bool = True
    include_location: bool = True
    include_genre: bool = True
    max_auto_categories: int = 0


@dataclass
class GenerationContext:
    form_data: Dict[str, Any] = field(default_factory=dict)
    entity_data: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    workflow_config: Optional[Dict[str, Any]] = None
    preferences: Optional[CategoryPreferences] = None


def resolve_path(data: Any, path: str) -> Any:
    """Follows a dotted path through nested dicts; None when any hop is missing."""
    current = data
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return None
    return current


def extract_category_rules(workflow_config: Dict[str, Any]) -> List[CategoryRule]:
    """Rules declared by each pane of a workflow plus its global categories."""
    raw_rules = []
    for pane in workflow_config.get("panes", []):
        raw_rules.extend((pane.get("config") or {}).get("categoryRules", []))
    raw_rules.extend(workflow_config.get("globalCategories") or [])
    return [rule if isinstance(rule, CategoryRule) else CategoryRule.from_dict(rule) for rule in raw_rules]


class CategoryGenerator:
    """Applies category rules and entity analysis to a form."""

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons
        self._templates: Dict[str, CategoryTemplate] = {}
        self._history: List[Dict[str, Any]] = []
        self._register_builtin_templates()

    async def generate(self, context: GenerationContext, rules: Optional[List[CategoryRule]] = None) -> CategoryGenerationResult:
        started = time.perf_counter()
        categories: List[GeneratedCategory] = []
        suggestions: List[GeneratedCategory] = []
        warnings: List[str] = []
        seen = set()
        produced = 0

        all_rules = list(rules or [])
        if context.workflow_config:
            all_rules.extend(extract_category_rules(context.workflow_config))

        for rule in sorted(all_rules, key=lambda r: r.priority, reverse=True):
            try:
                generated = self._process_rule(rule, context)
            except Exception as e:
                warnings.append(f'Error processing rule "{rule.template}": {e}')
                continue
            for category in generated:
                produced += 1
                key = category.name.lower()
                if key in seen:
                    continue
                seen.add(key)
                (suggestions if rule.type == CategoryRuleType.SUGGESTED else categories).append(category)

        for category in await self._generate_from_entities(context):
            produced += 1
            key = category.name.lower()
            if key in seen:
                continue
            seen.add(key)
            (suggestions if category.type == CategoryRuleType.SUGGESTED else categories).append(category)

        categories, suggestions = self._apply_preferences(categories, suggestions, context.preferences)

        result = CategoryGenerationResult(
            categories=categories,
            suggestions=suggestions,
            warnings=warnings,
            totalGenerated=produced,
            duplicatesRemoved=produced - len(categories) - len(suggestions),
            processingTime=round((time.perf_counter() - started) * 1000, 3),
        )
        self._add_to_history(context, result)
        logger.info("categories_generated", count=len(categories), suggestions=len(suggestions), warnings=len(warnings))
        return result

    # --- Rules ---

    def _process_rule(self, rule: CategoryRule, context: GenerationContext) -> List[GeneratedCategory]:
        if rule.condition and context.form_data and not rule.condition(context.form_data):
            return []

        source_data = resolve_path(context.form_data, rule.source)
        if not source_data:
            return []

        name = self._process_template(rule.template, source_data, context)
        if not name:
            return []

        return [GeneratedCategory(
            name=name,
            source=rule.source,
            type=rule.type,
            priority=rule.priority,
            confidence=self._confidence(rule, source_data),
            rule=rule.template,
            alternatives=self._alternatives(rule.template, source_data, context),
        )]

    def _process_template(self, template: str, data: Any, context: GenerationContext) -> Optional[str]:
        result = template
        for key in _PLACEHOLDER.findall(template):
            value = self._extract_value(key, data, context)
            if value is None:
                return None
            result = result.replace(f"{{{key}}}", self._format_value(value), 1)
        return result

    def _extract_value(self, key: str, data: Any, context: GenerationContext) -> Any:
        if key == "year":
            return self._extract_year(data, context)
        if key == "location":
            return self._extract_location(data)
        if key == "country":
            return self._extract_country(data, context)
        if key == "genre":
            return self._extract_genre(data)
        if isinstance(data, dict):
            return data.get(key)
        return None

    def _format_value(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return ", ".join(self._format_value(v) for v in value)
        if isinstance(value, dict):
            en_label = (value.get("labels") or {}).get("en")
            if en_label:
                return en_label["value"]
            if value.get("name"):
                return value["name"]
            if value.get("id"):
                return value["id"]
        return str(value)

    def _extract_year(self, data: Any, context: GenerationContext) -> Optional[str]:
        if isinstance(data, dict):
            for field_name in _DATE_FIELDS:
                year = year_of(data.get(field_name))
                if year:
                    return year
        for entity in context.entity_data.values():
            year = wd.time_year(entity, wd.P_START_TIME) or wd.time_year(entity, wd.P_POINT_IN_TIME)
            if year:
                return year
        return None

    def _extract_location(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        if data.get("location"):
            return self._format_value(data["location"])
        venue = data.get("venue")
        if venue:
            if isinstance(venue, dict) and venue.get("location"):
                return self._format_value(venue["location"])
            return self._format_value(venue)
        return None

    def _extract_country(self, data: Any, context: GenerationContext) -> Optional[str]:
        if isinstance(data, dict) and data.get("country"):
            return self._format_value(data["country"])
        for entity in context.entity_data.values():
            country = wd.first_claim_value(entity, wd.P_COUNTRY)
            if country:
                return self._label_for(country, context)
        return None

    def _extract_genre(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        if data.get("genre"):
            return self._format_value(data["genre"])
        genres = data.get("genres")
        if isinstance(genres, list) and genres:
            return self._format_value(genres[0])
        return None

    def _label_for(self, value: Any, context: GenerationContext) -> str:
        """Label of an item value when the item itself is in the entity data, else the raw value."""
        if isinstance(value, dict) and value.get("id") in context.entity_data:
            return wd.label(context.entity_data[value["id"]]) or value["id"]
        return self._format_value(value)

    @staticmethod
    def _confidence(rule: CategoryRule, source_data: Any) -> float:
        confidence = 0.5
        if isinstance(source_data, dict) and source_data.get("labels"):
            confidence += 0.3
        if rule.type == CategoryRuleType.REQUIRED:
            confidence += 0.2
        if rule.priority >= 8:
            confidence += 0.2
        elif rule.priority >= 6:
            confidence += 0.1
        if rule.condition:
            confidence -= 0.1
        return round(min(max(confidence, 0.0), 1.0), 4)

    def _alternatives(self, template: str, source_data: Any, context: GenerationContext) -> List[str]:
        alternatives = []
        if "{location}" in template:
            location = self._extract_location(source_data)
            if location:
                alternatives.append(template.replace("{location}", f"{location} area"))
                alternatives.append(template.replace("{location}", f"{location} region"))
        if "{year}" in template:
            year = self._extract_year(source_data, context)
            if year:
                alternatives.append(template.replace("{year}", f"{int(year) // 10 * 10}s"))
        return alternatives

    # --- Entities ---

    async def _generate_from_entities(self, context: GenerationContext) -> List[GeneratedCategory]:
        generated: List[GeneratedCategory] = []
        for entity in context.entity_data.values():
            if is_performer(entity):
                try:
                    info = await get_performer_category(entity, self.commons)
                except Exception as e:
                    logger.warning("performer_category_failed", qid=entity.get("id"), error=str(e))
                    continue
                generated.append(GeneratedCategory(
                    name=info.commonsCategory,
                    source="performer-entity",
                    type=CategoryRuleType.AUTO,
                    priority=9,
                    confidence=1.0 if info.source == "p373" else 0.85,
                ))
                continue

            for type_id in wd.item_ids(entity, wd.P_INSTANCE_OF):
                generated.extend(self._from_entity_type(type_id, entity, context))
        return generated

    def _from_entity_type(self, type_id: str, entity: Dict[str, Any], context: GenerationContext) -> List[GeneratedCategory]:
        if type_id == wd.Q_BAND:
            genre = wd.first_claim_value(entity, wd.P_GENRE)
            if genre:
                return [GeneratedCategory(
                    name=f"{self._label_for(genre, context)} musical groups",
                    source="entity-analysis",
                    type=CategoryRuleType.SUGGESTED,
                    priority=6,
                    confidence=0.8,
                )]
        elif type_id == wd.Q_MUSIC_FESTIVAL:
            return [GeneratedCategory(
                name="Music festivals", source="entity-analysis",
                type=CategoryRuleType.AUTO, priority=8, confidence=0.95,
            )]
        elif type_id == wd.Q_CONCERT:
            return [GeneratedCategory(
                name="Concerts", source="entity-analysis",
                type=CategoryRuleType.AUTO, priority=8, confidence=0.95,
            )]
        return []

    # --- Preferences ---

    @staticmethod
    def _apply_preferences(
        categories: List[GeneratedCategory],
        suggestions: List[GeneratedCategory],
        preferences: Optional[CategoryPreferences],
    ) -> Tuple[List[GeneratedCategory], List[GeneratedCategory]]:
        if preferences is None:
            return categories, suggestions

        if not preferences.include_year:
            categories = [c for c in categories if not _YEAR_PATTERN.search(c.name) and "year" not in c.name]
        if not preferences.include_location:
            categories = [c for c in categories if "location" not in c.source and " in " not in c.name]

        def ranking(c: GeneratedCategory):
            return (-c.priority, -c.confidence)

        if preferences.max_auto_categories > 0:
            categories = sorted(categories, key=lambda c: -c.priority)[:preferences.max_auto_categories]

        return sorted(categories, key=ranking), sorted(suggestions, key=ranking)

    # --- Templates & history ---

    def register_template(self, template: CategoryTemplate) -> None:
        self._templates[template.id] = template

    def get_templates(self) -> List[CategoryTemplate]:
        return list(self._templates.values())

    def templates_for_type(self, type_id: str) -> List[CategoryTemplate]:
        return [t for t in self._templates.values() if "*" in t.applicable_types or type_id in t.applicable_types]

    def get_history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history = []

    def _add_to_history(self, context: GenerationContext, result: CategoryGenerationResult) -> None:
        self._history.append({"timestamp": datetime.now(timezone.utc), "context": context, "result": result})
        if len(self._history) > HISTORY_LIMIT:
            self._history = self._history[-HISTORY_LIMIT:]

    def _register_builtin_templates(self) -> None:
        for template in (
            CategoryTemplate(
                id="music-festival-location", name="Music festivals by location",
                template="Music festivals in {location}", applicable_types=[wd.Q_MUSIC_FESTIVAL], priority=8,
                description="Location-based music festival categories",
                examples=["Music festivals in Germany", "Music festivals in California"],
            ),
            CategoryTemplate(
                id="music-year", name="Music by year",
                template="{year} in music", applicable_types=[wd.Q_MUSIC_FESTIVAL, wd.Q_CONCERT], priority=7,
                description="Year-based music categories", examples=["2024 in music"],
            ),
            CategoryTemplate(
                id="football-match", name="Football matches",
                template="{homeTeam} vs {awayTeam}", applicable_types=[wd.Q_ASSOCIATION_FOOTBALL_MATCH], priority=9,
                description="Match-specific categories", examples=["Barcelona vs Real Madrid"],
            ),
            CategoryTemplate(
                id="person-nationality", name="People by nationality",
                template="{nationality} {occupation}", applicable_types=[wd.Q_HUMAN], priority=6,
                description="Nationality-based person categories", examples=["German musicians"],
            ),
            CategoryTemplate(
                id="events-location", name="Events by location",
                template="Events in {location}", applicable_types=["*"], priority=5,
                description="Location-based event categories", examples=["Events in Berlin"],
            ),
        ):
            self.register_template(template)
