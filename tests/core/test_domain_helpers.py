# tests/core/test_domain_helpers.py
from datetime import date, datetime

import pytest

from wikiportraits.core.domain import dates
from wikiportraits.core.domain import entity_builders as eb
from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.exceptions import InvalidRequestError
from wikiportraits.core.domain.models import PendingEntity


class TestDates:

    @pytest.mark.parametrize("value, expected", [
        ("2025-06-15", date(2025, 6, 15)),
        ("2025-06-15T18:00:00Z", date(2025, 6, 15)),
        ("+2024-01-01T00:00:00Z", date(2024, 1, 1)),
        ("1994", date(1994, 1, 1)),
        (datetime(2020, 5, 1, 12, 0), date(2020, 5, 1)),
        ("", None),
        ("next summer", None),
        (None, None),
    ])
    def test_parse_date(self, value, expected):
        assert dates.parse_date(value) == expected

    def test_year_helpers(self):
        assert dates.year_of("2025-06-15") == "2025"
        assert dates.year_of(None) is None
        assert dates.date_to_year(date(2019, 3, 1)) == 2019
        assert dates.year_to_date("1799") is None
        assert dates.year_to_date("2000") == date(2000, 1, 1)
        assert dates.year_input_to_date("200") is None

    def test_year_input_validation(self):
        assert dates.is_valid_year_input("") is True
        assert dates.is_valid_year_input("19") is True
        assert dates.is_valid_year_input("19a") is False
        assert dates.is_valid_complete_year("1800") is False
        assert dates.is_valid_complete_year(1994) is True
        assert dates.is_valid_complete_year("soon") is False

    def test_wikidata_dates(self):
        assert dates.wd_date_to_date("+2024-03-01T00:00:00Z") == date(2024, 3, 1)
        assert dates.wd_date_to_date("") is None
        assert dates.date_to_wd_date(date(2024, 3, 1)) == "+2024-03-01T00:00:00Z"

    def test_display_formats(self):
        assert dates.format_date_for_display("2024-01-05") == "2024"
        assert dates.format_date_for_display("2024-01-05", "month-year") == "January 2024"
        assert dates.format_date_for_display("2024-01-05", "full") == "January 5, 2024"
        assert dates.format_date_for_display(None) == ""

    def test_is_same_year(self):
        assert dates.is_same_year("2024-01-01", "2024-12-31") is True
        assert dates.is_same_year("2024-01-01", None) is False


class TestWikidataHelpers:

    ENTITY = {
        "labels": {"en": {"value": "Kari"}, "nb": {"value": "Kari N."}},
        "aliases": {"en": [{"value": "K"}]},
        "claims": {
            "P31": [{"mainsnak": {"datavalue": {"value": {"id": "Q5"}}}}],
            "P569": [{"mainsnak": {"datavalue": {"value": {"time": "+1994-00-00T00:00:00Z"}}}}],
            "P373": [{"mainsnak": {"snaktype": "novalue"}}],
        },
        "sitelinks": {"nbwiki": {"title": "Kari Nordmann"}},
    }

    def test_accessors(self):
        assert wd.label(self.ENTITY, "nb") == "Kari N."
        assert wd.label(self.ENTITY, "de") == "Kari"
        assert wd.description(self.ENTITY) is None
        assert wd.aliases(self.ENTITY) == ["K"]
        assert wd.item_ids(self.ENTITY, "P31") == ["Q5"]
        assert wd.claim_values(self.ENTITY, "P373") == []
        assert wd.time_year(self.ENTITY, "P569") == "1994"
        assert wd.is_human(self.ENTITY) is True

    def test_sitelink_url(self):
        assert wd.sitelink_url(self.ENTITY, "nbwiki") == "https://nb.wikipedia.org/wiki/Kari_Nordmann"
        assert wd.sitelink_url(self.ENTITY) is None

    def test_lookup_tables(self):
        assert wd.country_qid("Norway") == "Q20"
        assert wd.country_qid("Atlantis") == wd.DEFAULT_COUNTRY_QID
        assert wd.gender_qid(None) == wd.Q_UNKNOWN_GENDER
        assert wd.instrument_qid("Drums") == "Q128309"


class TestEntityBuilders:

    def test_format_claim_value(self):
        assert eb.format_claim_value("P180", "Q42") == {"entity-type": "item", "id": "Q42"}
        assert eb.format_claim_value("P585", "2025-06-15")["time"] == "+2025-06-15T00:00:00Z"
        # Not a time property: the date stays a string
        assert eb.format_claim_value("P1476", "2025-06-15") == "2025-06-15"
        assert eb.format_claim_value("P1082", 42) == 42

    def test_band(self):
        data = eb.build_entity(PendingEntity(type="band", name="FordRekord"))

        assert data["labels"]["en"]["value"] == "FordRekord"
        assert data["descriptions"]["en"]["value"] == "FordRekord is a band"
        assert data["claims"]["P31"][0]["mainsnak"]["datavalue"]["value"]["id"] == wd.Q_MUSICAL_GROUP

    def test_band_member(self):
        """
        Scenario: A member of a band that is itself still pending creation.
        Expected: No P463 claim; instruments, citizenship and birth year are set.
        """
        entity = PendingEntity(type="band_member", name="Kari", data={
            "legalName": "Kari Nordmann",
            "gender": "female",
            "instruments": ["vocals", "theremin"],
            "bandId": "pending-1",
            "nationality": "Norway",
            "birthDate": "1994-01-01",
        })

        data = eb.build_entity(entity)
        claims = data["claims"]

        assert data["aliases"]["en"][0]["value"] == "Kari Nordmann"
        assert "P463" not in claims
        assert [c["mainsnak"]["datavalue"]["value"]["id"] for c in claims["P1303"]] == [
            "Q27939", wd.DEFAULT_INSTRUMENT_QID,
        ]
        assert claims["P27"][0]["mainsnak"]["datavalue"]["value"]["id"] == "Q20"
        assert claims["P569"][0]["mainsnak"]["datavalue"]["value"]["precision"] == eb.PRECISION_YEAR

    def test_band_member_of_existing_band(self):
        data = eb.build_entity(PendingEntity(type="band_member", name="Ola", data={"bandId": "Q77"}))

        assert data["claims"]["P463"][0]["mainsnak"]["datavalue"]["value"]["id"] == "Q77"
        assert data["claims"]["P21"][0]["mainsnak"]["datavalue"]["value"]["id"] == wd.Q_UNKNOWN_GENDER

    def test_photographer(self):
        data = eb.build_entity(PendingEntity(type="photographer", name="Per", data={
            "wikimediaUsername": "Per", "website": "https://per.example",
        }))

        assert data["claims"]["P106"][0]["mainsnak"]["datavalue"]["value"]["id"] == wd.Q_PHOTOGRAPHER
        assert data["claims"]["P4174"][0]["mainsnak"]["datavalue"] == {"value": "Per", "type": "string"}
        assert "P856" in data["claims"]

    def test_validation(self):
        with pytest.raises(InvalidRequestError, match="name is required"):
            eb.build_entity(PendingEntity(type="band", name="  "))
        with pytest.raises(InvalidRequestError, match="Invalid entity type"):
            eb.build_entity(PendingEntity(type="venue", name="Folken"))

    def test_creation_message(self):
        message = eb.creation_message(PendingEntity(type="band_member", name="Kari"))

        assert message == 'Band member "Kari" created successfully on wikidata.org'
