# tests/core/test_categories.py
import pytest

from wikiportraits.core.categories import band, music, performer, soccer
from wikiportraits.core.categories import wikiportraits as wp


def p373(value):
    return {"P373": [{"mainsnak": {"datavalue": {"value": value}}}]}


FESTIVAL_EVENT = {
    "eventType": "festival",
    "festivalData": {
        "festival": {"name": "Øyafestivalen", "year": 2024, "location": "Oslo", "country": "Norway"},
        "selectedBands": [{"name": "Sigrid", "wikipediaUrl": "https://en.wikipedia.org/wiki/Sigrid_(singer)"}],
        "addToWikiPortraitsConcerts": True,
    },
}

CONCERT_EVENT = {
    "eventType": "concert",
    "concertData": {
        "concert": {
            "artist": {"name": "a-ha"},
            "venue": "Oslo Spektrum",
            "city": "Oslo",
            "date": "2024-03-01",
            "tour": "Hunting High and Low",
        },
    },
}

MATCH = {
    "homeTeam": {"name": "Viking"},
    "awayTeam": {"name": "Brann"},
    "date": "2024-05-16",
    "competition": "Eliteserien",
    "venue": "SR-Bank Arena",
}
PLAYERS = [{"name": "Zlatko Tripic", "team": "Viking", "position": "Midfielder"}]


class TestMusicCategories:

    def test_unified_event_categories(self, unified_event):
        """
        Scenario: A unified event with a year and a participant that has a Commons category.
        Expected: The WikiPortraits tree with the year first, the event category and the participant's category.
        """
        categories = music.generate_music_categories(unified_event)

        assert categories == sorted([
            "WikiPortraits",
            "WikiPortraits at 2025 Jærnåttå",
            "WikiPortraits in 2025",
            "WikiPortraits at music events",
            "Jærnåttå 2025",
            "FordRekord",
        ])

    def test_unified_event_prefers_commons_category(self, unified_event):
        unified_event["commonsCategory"] = "Jærnåttå festival 2025"

        categories = music.generate_music_categories(unified_event)

        assert "Jærnåttå festival 2025" in categories
        assert "Jærnåttå 2025" not in categories

    def test_no_event_data(self):
        assert music.generate_music_categories(None) == ["WikiPortraits"]
        assert music.generate_music_categories({"eventType": "unknown"}) == ["WikiPortraits"]

    def test_festival_categories(self):
        categories = music.generate_music_categories(FESTIVAL_EVENT)

        assert categories == sorted([
            "WikiPortraits",
            "WikiPortraits at Concerts",
            "Øyafestivalen 2024",
            "Øyafestivalen",
            "Music festivals in Oslo",
            "Music festivals in Norway",
            "Music festivals in 2024",
            "Sigrid",
            "Sigrid at Øyafestivalen 2024",
        ])

    def test_festival_categories_without_bands(self):
        categories = music.generate_music_categories(FESTIVAL_EVENT, include_band=False, include_wp_integration=False)

        assert "Sigrid" not in categories
        assert "Sigrid at Øyafestivalen 2024" not in categories
        assert "WikiPortraits at Concerts" not in categories

    def test_concert_categories(self):
        categories = music.generate_music_categories(CONCERT_EVENT)

        assert categories == sorted([
            "WikiPortraits",
            "a-ha",
            "Concerts at Oslo Spektrum",
            "Concerts in Oslo",
            "Concerts in 2024",
            "Hunting High and Low tour",
            "a-ha tours",
        ])

    def test_image_categories_for_band(self, unified_event):
        """
        Scenario: Per-image categories for a band at a unified event.
        Expected: The band-at-event and band-in-year categories, but not the bare band category.
        """
        categories = music.generate_image_categories(unified_event, "FordRekord")

        assert "FordRekord at Jærnåttå 2025" in categories
        assert "FordRekord in 2025" in categories
        assert "FordRekord" not in categories

    def test_detect_band_categories(self):
        found = music.detect_band_categories(["FordRekord at Jærnåttå 2025", "Concerts in 2025"], "Jærnåttå 2025")

        assert [info.categoryName for info in found] == ["FordRekord at Jærnåttå 2025"]
        assert found[0].description == "[[FordRekord]] performing at Jærnåttå 2025."

    def test_page_names_and_descriptions(self):
        assert music.generate_event_page_category(FESTIVAL_EVENT) == "Øyafestivalen 2024"
        assert music.generate_event_page_category(CONCERT_EVENT) == "a-ha concert at Oslo Spektrum (3/1/2024)"
        assert music.generate_event_description(FESTIVAL_EVENT) == (
            "Photos from Øyafestivalen 2024 in Oslo. Featured band: Sigrid."
        )
        assert music.generate_event_description({}) == "Music event photos."

    def test_wikipedia_page_name(self):
        assert music.wikipedia_page_name("Sigrid", "https://en.wikipedia.org/wiki/Sigrid_(singer)") == "Sigrid (singer)"
        assert music.wikipedia_page_name("Sigrid") == "Sigrid"


class TestMusicCategoriesToCreate:

    def test_unified_hierarchy(self, unified_event):
        """
        Scenario: Category plan for a unified event.
        Expected: event > by year > event year, the WikiPortraits branch, and band entries.
        """
        plan = music.get_categories_to_create(unified_event)
        by_name = {}
        for info in plan:
            by_name.setdefault(info.categoryName, info)

        assert by_name["Jærnåttå"].shouldCreate is True
        assert by_name["Jærnåttå by year"].parentCategory == "Jærnåttå"
        assert by_name["Jærnåttå 2025"].parentCategory == "Jærnåttå by year"
        assert by_name["WikiPortraits at 2025 Jærnåttå"].parentCategory == "WikiPortraits in 2025"
        assert by_name["WikiPortraits at 2025 Jærnåttå"].additionalParents == ["WikiPortraits at music events"]
        assert by_name["FordRekord at Jærnåttå 2025"].parentCategory == "Jærnåttå 2025"

    def test_participant_category_gets_second_parent(self, unified_event):
        plan = [info for info in music.get_categories_to_create(unified_event) if info.categoryName == "FordRekord"]

        assert len(plan) == 2
        assert plan[0].shouldCreate is True
        assert plan[1].shouldCreate is False
        assert plan[1].parentCategory == "WikiPortraits at 2025 Jærnåttå"

    def test_well_known_series_are_not_created(self):
        plan = music.get_categories_to_create({"title": "Eurovision Song Contest", "date": "2025-05-17"})
        by_name = {info.categoryName: info for info in plan}

        assert by_name["Eurovision Song Contest"].shouldCreate is False
        assert by_name["Eurovision Song Contest by year"].shouldCreate is False
        assert by_name["Eurovision Song Contest 2025"].shouldCreate is True

    def test_existing_event_category_is_not_created(self, unified_event):
        unified_event["categoryExists"] = True

        plan = music.get_categories_to_create(unified_event)

        assert next(i for i in plan if i.categoryName == "Jærnåttå 2025").shouldCreate is False

    def test_festival_plan_uses_wikipedia_title(self):
        plan = music.get_categories_to_create(FESTIVAL_EVENT)
        band_entry = next(i for i in plan if i.categoryName == "Sigrid at Øyafestivalen 2024")

        assert band_entry.parentCategory == "Øyafestivalen 2024"
        assert band_entry.description == "[[Sigrid (singer)]] performing at [[Øyafestivalen]] 2024."

    def test_concert_without_artist(self):
        assert music.get_categories_to_create({"eventType": "concert", "concertData": {"concert": {}}}) == []


class TestWikiPortraitsCategories:

    def test_tree(self):
        tree = wp.generate_wikiportraits_categories("Jærnåttå", "2025")

        assert tree["mainCategory"] == "WikiPortraits at 2025 Jærnåttå"
        assert tree["yearCategory"] == "WikiPortraits in 2025"
        assert tree["typeCategory"] == "WikiPortraits at music events"
        assert tree["categoriesToCreate"][0].additionalParents == ["WikiPortraits at music events"]

    def test_extract_event_name_without_year(self):
        assert wp.extract_event_name_without_year("Jærnåttå 2025") == "Jærnåttå"
        assert wp.extract_event_name_without_year("Jærnåttå") == "Jærnåttå"

    @pytest.mark.asyncio
    async def test_only_missing(self, mock_commons):
        """
        Scenario: The year and type categories already exist on Commons.
        Expected: Only the event category is left to create.
        """
        mock_commons.category_exists.side_effect = lambda name: name != "WikiPortraits at 2025 Jærnåttå"

        missing = await wp.get_wikiportraits_categories_to_create(mock_commons, "Jærnåttå", "2025")

        assert [info.categoryName for info in missing] == ["WikiPortraits at 2025 Jærnåttå"]


class TestSoccerCategories:

    def test_match_categories(self):
        categories = soccer.generate_soccer_categories(MATCH, PLAYERS)

        assert categories == sorted([
            "WikiPortraits",
            "Viking vs Brann",
            "Viking vs Brann 2024",
            "Eliteserien matches",
            "Eliteserien 2024",
            "Matches at SR-Bank Arena",
            "Viking matches",
            "Players of Viking",
            "Brann matches",
            "Players of Brann",
            "Zlatko Tripic",
            "Midfielders",
            "Viking Midfielders",
        ])

    def test_categories_to_create(self):
        plan = soccer.get_categories_to_create(MATCH, PLAYERS)

        assert [info.categoryName for info in plan] == [
            "Players of Viking",
            "Players of Brann",
            "Zlatko Tripic",
            "Viking vs Brann 2024",
        ]
        assert plan[0].teamName == "Viking"
        assert plan[2].description == "[[Zlatko Tripic]], Midfielder of [[Viking]]."

    def test_page_name_and_descriptions(self):
        assert soccer.generate_match_page_category(MATCH) == "Viking vs Brann (5/16/2024) - Eliteserien"
        assert soccer.generate_match_page_category({}) == "Unnamed Match"
        assert soccer.generate_player_description(PLAYERS[0], MATCH) == (
            "Zlatko Tripic, Midfielder of Viking during the match against Brann on May 16, 2024."
        )


@pytest.mark.asyncio
class TestBandCategories:

    async def test_p373_matching_name(self, mock_wikidata, mock_commons):
        """
        Scenario: The band item's P373 equals the band name.
        Expected: No disambiguation, and Commons is not asked.
        """
        mock_wikidata.get_entity.return_value = {"id": "Q1", "claims": p373("FordRekord")}

        result = await band.check_needs_disambiguation("FordRekord", "Q1", mock_wikidata, mock_commons)

        assert result == (False, "FordRekord")
        mock_commons.category_exists.assert_not_called()

    async def test_p373_differs(self, mock_wikidata, mock_commons):
        mock_wikidata.get_entity.return_value = {"id": "Q1", "claims": p373("Ingenting (band)")}

        result = await band.check_needs_disambiguation("Ingenting", "Q1", mock_wikidata, mock_commons)

        assert result == (True, "Ingenting (band)")

    async def test_free_name(self, mock_wikidata, mock_commons):
        mock_commons.category_exists.return_value = False

        assert await band.check_needs_disambiguation("FordRekord", "Q1", mock_wikidata, mock_commons) == (
            False, "FordRekord"
        )

    async def test_existing_category_of_same_item(self, mock_wikidata, mock_commons):
        mock_commons.category_exists.return_value = True
        mock_commons.get_page_content.return_value = "{{Wikidata Infobox|Q1}}"

        assert await band.check_needs_disambiguation("FordRekord", "Q1", mock_wikidata, mock_commons) == (
            False, "FordRekord"
        )

    async def test_existing_category_of_other_item(self, mock_wikidata, mock_commons):
        """
        Scenario: "Ingenting" exists on Commons for another item.
        Expected: The " (band)" suffix is used.
        """
        mock_commons.category_exists.return_value = True
        mock_commons.get_page_content.return_value = "{{Wikidata Infobox|Q999}}\n[[Category:Nothing]]"

        assert await band.check_needs_disambiguation("Ingenting", "Q1", mock_wikidata, mock_commons) == (
            True, "Ingenting (band)"
        )

    async def test_lookup_failure_disambiguates(self, mock_wikidata, mock_commons):
        mock_wikidata.get_entity.side_effect = Exception("timeout")
        mock_commons.category_exists.side_effect = Exception("timeout")

        assert await band.check_needs_disambiguation("Ingenting", "Q1", mock_wikidata, mock_commons) == (
            True, "Ingenting (band)"
        )

    async def test_structures_are_flattened(self, mock_wikidata, mock_commons):
        structures = await band.get_all_band_category_structures(
            [{"name": "FordRekord", "qid": "Q1"}, {"name": "FordRekord", "qid": "Q1"}],
            "2025", "Jærnåttå 2025", mock_wikidata, mock_commons,
        )

        flat = band.flatten_band_categories(structures)

        assert [info.categoryName for info in flat] == [
            "FordRekord",
            "FordRekord by year",
            "FordRekord in 2025",
            "FordRekord at Jærnåttå 2025",
        ]
        assert flat[-1].additionalParents == ["Jærnåttå 2025"]


def human(qid="Q9", name="Kari", claims=None):
    entity_claims = {"P31": [{"mainsnak": {"datavalue": {"value": {"id": "Q5"}}}}]}
    entity_claims.update(claims or {})
    return {"id": qid, "labels": {"en": {"value": name}}, "claims": entity_claims}


def item_claim(prop, qid):
    return {prop: [{"mainsnak": {"datavalue": {"value": {"id": qid}}}}]}


@pytest.mark.asyncio
class TestPerformerCategories:

    async def test_p373(self, mock_commons):
        mock_commons.category_exists.return_value = True

        info = await performer.get_performer_category(human(claims=p373("Kari Nordmann")), mock_commons)

        assert info.commonsCategory == "Kari Nordmann"
        assert info.source == "p373"
        assert info.needsCreation is False

    async def test_free_base_name(self, mock_commons):
        info = await performer.get_performer_category(human(), mock_commons)

        assert info.commonsCategory == "Kari"
        assert info.source == "base"
        assert info.needsCreation is True

    async def test_existing_without_infobox_is_reused(self, mock_commons):
        mock_commons.category_exists.return_value = True
        mock_commons.get_page_content.return_value = "[[Category:Singers]]"

        info = await performer.get_performer_category(human(), mock_commons)

        assert info.commonsCategory == "Kari"
        assert info.needsCreation is False

    async def test_collision_uses_occupation(self, mock_commons):
        """
        Scenario: "Kari" exists for another item and the performer is a singer.
        Expected: "Kari (singer)".
        """
        mock_commons.category_exists.side_effect = lambda name: name == "Kari"
        mock_commons.get_page_content.return_value = "{{Wikidata Infobox|Q1}}"

        info = await performer.get_performer_category(human(claims=item_claim("P106", "Q177220")), mock_commons)

        assert info.commonsCategory == "Kari (singer)"
        assert info.source == "disambiguated"
        assert info.needsCreation is True

    async def test_add_to_image(self, mock_commons):
        categories = await performer.add_performer_categories_to_image(["Kari", "Concerts"], [human()], mock_commons)

        assert categories == ["Kari", "Concerts"]


class TestPerformerDisambiguation:

    def test_fallbacks(self):
        """
        Scenario: Performers without a known occupation.
        Expected: Nationality first, then the generic "(musician)".
        """
        assert performer.get_disambiguated_category_name("Kari", human(claims=item_claim("P27", "Q20"))) == (
            "Kari (Norwegian musician)"
        )
        assert performer.get_disambiguated_category_name("Kari", human()) == "Kari (musician)"
        assert performer.get_disambiguated_category_name("Kari", human(claims=item_claim("P106", "Q1"))) == (
            "Kari (musician)"
        )
