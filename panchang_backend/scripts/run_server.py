"""
Script de serveur de développement.

Lance l'application FastAPI avec uvicorn sur l'hôte et le port configurés (`APP_HOST`,
`APP_PORT`). Le fournisseur distant est celui de `PROVIDER_API_URL`.
"""

import uvicorn

from panchang_backend.app.main import app
from panchang_backend.core.container import container


def main():
    """Point d'entrée principal du serveur de développement."""
    settings = container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT, reload=False)


if __name__ == "__main__":
    main()
