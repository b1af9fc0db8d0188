"""Tests for free-text brand/model/year heuristics."""

from fitment.freetext import (
    MAKE_MODEL_STRATEGIES,
    build_search_text,
    extract_free_text_fitments,
    extract_make_model,
    match_leading_words,
    match_pipe_row,
    match_trigger_phrase,
)
from fitment.models import FitmentTuple, Product


class TestStrategies:
    """Each heuristic on its own."""

    def test_strategy_order(self):
        names = [name for name, _ in MAKE_MODEL_STRATEGIES]
        assert names == ["pipe_row", "trigger_phrase", "leading_words"]

    def test_pipe_row(self):
        assert match_pipe_row("Subaru | Outback | 2006–2009 | 2.5L") == ("Subaru", "Outback")

    def test_pipe_row_requires_year(self):
        assert match_pipe_row("Subaru | Outback | 2.5L") is None

    def test_trigger_fits(self):
        assert match_trigger_phrase("Brake Pad fits Honda Accord 2010") == ("Honda", "Accord")

    def test_trigger_compatible_for(self):
        text = "Air filter compatible for Subaru Outback 2006-2009"
        assert match_trigger_phrase(text) == ("Subaru", "Outback")

    def test_trigger_compatible_with_is_case_insensitive(self):
        assert match_trigger_phrase("COMPATIBLE WITH Toyota Camry 2015") == ("Toyota", "Camry")

    def test_trigger_strips_body_style(self):
        assert match_trigger_phrase("Mat for Subaru Legacy Wagon 2012") == ("Subaru", "Legacy")
        assert match_trigger_phrase("Fits Honda Civic Sedan 4-Door 2014") == ("Honda", "Civic")
        assert match_trigger_phrase("for BMW 3 Series 2011") == ("BMW", "3")

    def test_trigger_strips_dangling_separator(self):
        assert match_trigger_phrase("fits Honda Accord - 2010") == ("Honda", "Accord")
        assert match_trigger_phrase("fits Honda CR-V - 2015") == ("Honda", "CR-V")

    def test_trigger_requires_capitalized_brand(self):
        assert match_trigger_phrase("fits most cars from 2010") is None

    def test_trigger_whole_word_only(self):
        assert match_trigger_phrase("Comfortable Seat Cover 2010") is None

    def test_leading_words(self):
        assert match_leading_words("Bosch wiper blade 22 inch") == ("Bosch", "wiper blade")

    def test_leading_words_skips_years(self):
        assert match_leading_words("Denso 2010 relay") == ("Denso", "relay")

    def test_leading_words_needs_two_words(self):
        assert match_leading_words("Wiper") is None


class TestExtractMakeModel:
    """Strategy chain."""

    def test_pipe_row_beats_trigger(self):
        text = "fits Honda Accord 2010\nSubaru | Forester | 2014"
        assert extract_make_model(text) == ("Subaru", "Forester")

    def test_trigger_beats_leading_words(self):
        assert extract_make_model("Brake Pad fits Honda Accord 2010") == ("Honda", "Accord")

    def test_default_brand_when_nothing_matches(self):
        assert extract_make_model("", default_brand="ACME") == ("ACME", "")
        assert extract_make_model("Wiper", default_brand="ACME") == ("ACME", "")


class TestBuildSearchText:

    def test_html_description_flattened(self):
        product = Product(
            id="1",
            title="Brake Pad",
            description="<p>Fits <b>Honda</b> Accord 2010</p>",
            tags="brakes, honda",
        )
        text = build_search_text(product)
        assert "<" not in text
        assert "Brake Pad" in text
        assert "brakes, honda" in text
        assert "Honda" in text


class TestExtractFreeTextFitments:
    """Years x best-guess brand/model."""

    def test_honda_scenario(self):
        product = Product(id="42", title="Brake Pad fits Honda Accord 2010")
        assert extract_free_text_fitments(product) == [FitmentTuple("Honda", "Accord", "2010")]

    def test_year_range_in_description(self):
        product = Product(
            id="7",
            title="Cabin Filter",
            description="<p>Compatible for Subaru Outback 2006-2008</p>",
        )
        assert extract_free_text_fitments(product) == [
            FitmentTuple("Subaru", "Outback", "2006"),
            FitmentTuple("Subaru", "Outback", "2007"),
            FitmentTuple("Subaru", "Outback", "2008"),
        ]

    def test_no_year_gives_single_unset_year(self):
        product = Product(id="9", title="Universal", vendor="ACME")
        assert extract_free_text_fitments(product) == [FitmentTuple("ACME", "", None)]

    def test_years_from_tags(self):
        product = Product(id="3", title="Mirror for Kia Rio 2013", tags="2014, mirrors")
        years = [f.year for f in extract_free_text_fitments(product)]
        assert years == ["2013", "2014"]
