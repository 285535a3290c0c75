"""Tests for JSON-LD structured data."""

from calcdeck import schema_org
from calcdeck.registry import get_calculator, list_calculators

BASE = "https://calc.test"


def _def(calc_id):
    return get_calculator(calc_id)["def"]


class TestCalculatorSchema:
    """Tests for calculator_schema."""

    def test_web_application(self) -> None:
        data = schema_org.calculator_schema(_def("bmi"), BASE, "Test Calcs")
        assert data["@context"] == "https://schema.org"
        assert data["@type"] == "WebApplication"
        assert data["name"] == "BMI Calculator"
        assert data["url"] == "https://calc.test/category/health/bmi"
        assert data["applicationCategory"] == "Calculator"
        assert data["softwareVersion"] == "1.0"
        assert data["publisher"] == {"@type": "Organization", "name": "Test Calcs", "url": BASE}
        assert data["offers"]["price"] == "0"
        assert data["offers"]["availability"] == "https://schema.org/InStock"
        assert data["keywords"] == "body composition, weight"
        assert data["mainEntityOfPage"]["@id"] == data["url"]

    def test_keywords_fallback(self) -> None:
        calc_def = _def("bmi").model_copy(update={"tags": []})
        data = schema_org.calculator_schema(calc_def, BASE)
        assert data["keywords"] == "BMI Calculator, calculator, Health"

    def test_defaults_from_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("CALCDECK_BASE_URL", "https://env.test/")
        monkeypatch.setenv("CALCDECK_SITE_NAME", "Env Calcs")
        data = schema_org.calculator_schema(_def("bmi"))
        assert data["url"] == "https://env.test/category/health/bmi"
        assert data["isPartOf"]["name"] == "Env Calcs"

    def test_trailing_slash(self) -> None:
        assert schema_org.calculator_url(_def("bmi"), BASE + "/") == "https://calc.test/category/health/bmi"


class TestSiteSchemas:
    """Tests for website, organization, breadcrumb and category schemas."""

    def test_category_label(self) -> None:
        assert schema_org.category_label("home-improvement") == "Home Improvement"
        assert schema_org.category_label("finance") == "Finance"

    def test_website_search_action(self) -> None:
        data = schema_org.website_schema(BASE)
        assert data["@type"] == "WebSite"
        assert data["potentialAction"]["target"]["urlTemplate"] == "https://calc.test/search?q={search_term_string}"

    def test_organization(self) -> None:
        data = schema_org.organization_schema(BASE, "Test Calcs")
        assert data["logo"]["url"] == "https://calc.test/logo.png"

    def test_breadcrumbs(self) -> None:
        items = schema_org.breadcrumb_schema(_def("tile_flooring"), BASE)["itemListElement"]
        assert [i["name"] for i in items] == ["Home", "Home Improvement", items[2]["name"]]
        assert [i["position"] for i in items] == [1, 2, 3]
        assert items[1]["item"] == "https://calc.test/category/home-improvement"
        assert items[2]["item"] == "https://calc.test/category/home-improvement/tile_flooring"

    def test_category_page(self) -> None:
        defs = [_def(item["id"]) for item in list_calculators("cricket")]
        data = schema_org.category_schema("cricket", defs, BASE)
        assert data["@type"] == "CollectionPage"
        assert data["name"] == "Cricket Calculators"
        assert data["mainEntity"]["numberOfItems"] == 9
        first = data["mainEntity"]["itemListElement"][0]
        assert first["position"] == 1
        assert first["item"]["url"].startswith("https://calc.test/category/cricket/")
