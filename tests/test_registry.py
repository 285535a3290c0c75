"""Tests for the merged calculator catalog."""

import pytest

from calcdeck import registry
from calcdeck.calculators import fun
from calcdeck.registry import CalculatorNotFound


class TestCatalog:
    """Tests for the merged catalog."""

    def test_catalog_size(self) -> None:
        assert len(registry.CALCULATORS) == 113

    def test_categories(self) -> None:
        counts = registry.categories()
        assert set(counts) == {"finance", "health", "fitness", "conversions", "cricket",
                               "home-improvement", "fun-games", "misc"}
        assert counts["finance"] == 49
        assert counts["cricket"] == 9
        assert sum(counts.values()) == 113

    def test_ids_match_definitions(self) -> None:
        for calc_id, entry in registry.CALCULATORS.items():
            assert entry["def"].id == calc_id
            assert callable(entry["run"])

    def test_related_ids_exist(self) -> None:
        for entry in registry.CALCULATORS.values():
            for rid in entry["def"].related:
                assert rid in registry.CALCULATORS, f"{entry['def'].id} -> {rid}"

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate calculator id"):
            registry._merge([fun, fun])


class TestLookup:
    """Tests for resolve_id and get_calculator."""

    @pytest.mark.parametrize("raw", ["bmi", "BMI", " bmi "])
    def test_resolve_case(self, raw) -> None:
        assert registry.resolve_id(raw) == "bmi"

    def test_resolve_hyphens(self) -> None:
        assert registry.resolve_id("Body-Surface-Area") == "body_surface_area"

    def test_not_found(self) -> None:
        with pytest.raises(CalculatorNotFound) as excinfo:
            registry.get_calculator("warp_drive")
        assert str(excinfo.value) == "Calculator 'warp_drive' not found"

    def test_not_found_is_a_key_error(self) -> None:
        with pytest.raises(KeyError):
            registry.resolve_id("warp_drive")


class TestListing:
    """Tests for list_calculators, search and related."""

    def test_list_all(self) -> None:
        listed = registry.list_calculators()
        assert len(listed) == 113
        assert set(listed[0]) == {"id", "title", "description", "category", "version"}

    def test_list_by_category(self) -> None:
        listed = registry.list_calculators("Cricket")
        assert len(listed) == 9
        assert all(item["category"] == "cricket" for item in listed)

    def test_unknown_category(self) -> None:
        assert registry.list_calculators("astrology") == []

    def test_search_puts_title_hits_first(self) -> None:
        hits = registry.search("bmi")
        ids = [h["id"] for h in hits]
        assert "bmi" in ids
        in_title = ["bmi" in h["title"].lower() for h in hits]
        assert in_title == sorted(in_title, reverse=True)

    def test_search_matches_tags(self) -> None:
        ids = [h["id"] for h in registry.search("body composition")]
        assert "bmi" in ids
        assert "lean_body_mass" in ids

    def test_search_category_and_limit(self) -> None:
        hits = registry.search("rate", category="cricket", limit=2)
        assert len(hits) == 2
        assert all(h["category"] == "cricket" for h in hits)

    def test_search_no_match(self) -> None:
        assert registry.search("zzzz-nothing") == []

    def test_related_explicit_first(self) -> None:
        picks = registry.related("bmi")
        assert picks[:3] == ["ponderal_index", "waist_to_bmi_ratio", "bmr"]
        assert len(picks) == 5
        assert "bmi" not in picks

    def test_related_limit(self) -> None:
        assert len(registry.related("bmi", limit=2)) == 2
