"""JSON-LD structured data for calculator pages."""

from typing import Any, Dict, List, Optional

from .config import get_settings
from .models import CalculatorDef

SCHEMA_CONTEXT = "https://schema.org"


def _base(base_url: Optional[str]) -> str:
    return (base_url or get_settings().base_url).rstrip("/")


def _site_name(name: Optional[str]) -> str:
    return name or get_settings().site_name


def category_label(slug: str) -> str:
    """home-improvement -> Home Improvement"""
    return " ".join(word.capitalize() for word in slug.split("-"))


def calculator_url(calc_def: CalculatorDef, base_url: Optional[str] = None) -> str:
    return f"{_base(base_url)}/category/{calc_def.category}/{calc_def.id}"


def _free_offer() -> Dict[str, str]:
    return {"@type": "Offer", "price": "0", "priceCurrency": "USD"}


def calculator_schema(calc_def: CalculatorDef, base_url: Optional[str] = None,
                      site_name: Optional[str] = None) -> Dict[str, Any]:
    base = _base(base_url)
    url = calculator_url(calc_def, base)
    keywords = ", ".join(calc_def.tags) if calc_def.tags else (
        f"{calc_def.title}, calculator, {category_label(calc_def.category)}")
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebApplication",
        "name": calc_def.title,
        "description": calc_def.description,
        "url": url,
        "applicationCategory": "Calculator",
        "operatingSystem": "Web Browser",
        "softwareVersion": calc_def.version,
        "publisher": {"@type": "Organization", "name": _site_name(site_name), "url": base},
        "offers": dict(_free_offer(), availability="https://schema.org/InStock"),
        "keywords": keywords,
        "isPartOf": {"@type": "WebSite", "name": _site_name(site_name), "url": base},
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }


def website_schema(base_url: Optional[str] = None, name: Optional[str] = None) -> Dict[str, Any]:
    base = _base(base_url)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": _site_name(name),
        "url": base,
        "potentialAction": {
            "@type": "SearchAction",
            "target": {"@type": "EntryPoint", "urlTemplate": f"{base}/search?q={{search_term_string}}"},
            "query-input": "required name=search_term_string",
        },
    }


def organization_schema(base_url: Optional[str] = None, name: Optional[str] = None) -> Dict[str, Any]:
    base = _base(base_url)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": _site_name(name),
        "url": base,
        "logo": {"@type": "ImageObject", "url": f"{base}/logo.png"},
    }


def _list_item(position: int, name: str, item: str) -> Dict[str, Any]:
    return {"@type": "ListItem", "position": position, "name": name, "item": item}


def breadcrumb_schema(calc_def: CalculatorDef, base_url: Optional[str] = None) -> Dict[str, Any]:
    """Home > Category > Calculator"""
    base = _base(base_url)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            _list_item(1, "Home", base),
            _list_item(2, category_label(calc_def.category), f"{base}/category/{calc_def.category}"),
            _list_item(3, calc_def.title, calculator_url(calc_def, base)),
        ],
    }


def category_schema(category: str, calc_defs: List[CalculatorDef], base_url: Optional[str] = None) -> Dict[str, Any]:
    """CollectionPage listing every calculator in one category."""
    base = _base(base_url)
    label = category_label(category)
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "CollectionPage",
        "name": f"{label} Calculators",
        "url": f"{base}/category/{category}",
        "mainEntity": {
            "@type": "ItemList",
            "numberOfItems": len(calc_defs),
            "itemListElement": [
                {
                    "@type": "ListItem",
                    "position": i,
                    "item": {
                        "@type": "WebApplication",
                        "name": d.title,
                        "description": d.description,
                        "url": calculator_url(d, base),
                        "applicationCategory": "Calculator",
                    },
                }
                for i, d in enumerate(calc_defs, start=1)
            ],
        },
    }
