"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/health` pour signaler l'état général de l'application et du registre local des lieux.
"""


from fastapi import APIRouter

from panchang_backend.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API, la taille du registre et la configuration du fournisseur."""
    return {
        "status": "ok",
        "places": len(container.registry),
        "provider_configured": bool(container.settings.PROVIDER_API_URL),
        "provider_auth": bool(container.settings.PROVIDER_API_KEY),
    }
