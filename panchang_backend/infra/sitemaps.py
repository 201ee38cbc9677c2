"""Génération des sitemaps XML par catégorie de pages.

Les entrées par lieu (panchang, rahu kaal, choghadiya) sont dérivées du registre local: seules les
villes du registre ont une page dédiée.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal
from xml.sax.saxutils import escape

from panchang_backend.domain.entities import Place

ChangeFreq = Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# page_type -> (fréquence, priorité) des pages par lieu
PLACE_SITEMAPS: dict[str, tuple[ChangeFreq, float]] = {
    "panchang": ("daily", 0.8),
    "rahu-kaal": ("daily", 0.8),
    "choghadiya": ("daily", 0.7),
}


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    lastmod: str | None = None
    changefreq: ChangeFreq | None = None
    priority: float | None = None


def _url_block(site_url: str, entry: SitemapEntry) -> str:
    lines = ["  <url>", f"    <loc>{escape(site_url + entry.url)}</loc>"]
    if entry.lastmod:
        lines.append(f"    <lastmod>{entry.lastmod}</lastmod>")
    if entry.changefreq:
        lines.append(f"    <changefreq>{entry.changefreq}</changefreq>")
    if entry.priority is not None:
        lines.append(f"    <priority>{entry.priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def generate_sitemap(entries: Iterable[SitemapEntry], site_url: str) -> str:
    """Sérialise un `<urlset>` à partir des entrées."""
    site = site_url.rstrip("/")
    urls = "\n".join(_url_block(site, e) for e in entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NS}">\n'
        f"{urls}\n"
        "</urlset>"
    )


def generate_sitemap_index(
    sitemaps: Iterable[str], site_url: str, today: dt.date | None = None
) -> str:
    """Sérialise un `<sitemapindex>` listant les sitemaps par catégorie."""
    site = site_url.rstrip("/")
    lastmod = (today or dt.date.today()).isoformat()
    blocks = "\n".join(
        f"  <sitemap>\n    <loc>{escape(f'{site}/{name}')}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n  </sitemap>"
        for name in sitemaps
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<sitemapindex xmlns="{SITEMAP_NS}">\n'
        f"{blocks}\n"
        "</sitemapindex>"
    )


def place_entries(
    places: Iterable[Place], page_type: str, today: dt.date | None = None
) -> list[SitemapEntry]:
    """Une entrée par lieu pour le type de page donné (ex: /rahu-kaal/delhi)."""
    changefreq, priority = PLACE_SITEMAPS[page_type]
    lastmod = (today or dt.date.today()).isoformat()
    return [
        SitemapEntry(
            url=place.url(page_type), lastmod=lastmod, changefreq=changefreq, priority=priority
        )
        for place in places
    ]


def sitemap_names() -> list[str]:
    return [f"sitemap-{page_type}.xml" for page_type in PLACE_SITEMAPS]
