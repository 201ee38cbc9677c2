"""
Sitemaps XML: index et sitemaps par type de page de lieu.

Expose `/sitemap-index.xml` et `/sitemap-{page_type}.xml` (panchang, rahu-kaal, choghadiya), avec
une entrée par lieu du registre local.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from panchang_backend.core.container import container
from panchang_backend.infra.sitemaps import (
    PLACE_SITEMAPS,
    generate_sitemap,
    generate_sitemap_index,
    place_entries,
    sitemap_names,
)

router = APIRouter(tags=["sitemaps"])

XML_MEDIA_TYPE = "application/xml"


@router.get("/sitemap-index.xml")
def sitemap_index():
    body = generate_sitemap_index(sitemap_names(), container.settings.SITE_URL)
    return Response(content=body, media_type=XML_MEDIA_TYPE)


@router.get("/sitemap-{page_type}.xml")
def place_sitemap(page_type: str):
    """Sitemap des pages par lieu pour `page_type`; 404 si le type est inconnu."""
    if page_type not in PLACE_SITEMAPS:
        raise HTTPException(status_code=404, detail="Sitemap not found")
    entries = place_entries(container.registry, page_type)
    return Response(
        content=generate_sitemap(entries, container.settings.SITE_URL),
        media_type=XML_MEDIA_TYPE,
    )
