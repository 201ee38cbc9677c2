"""Constantes HTTP pour éviter les valeurs magiques dans le code.

Ce module définit les codes de statut HTTP utilisés par les routes et par le client du fournisseur
astronomique.
"""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_NOT_FOUND = 404
HTTP_REQUEST_TIMEOUT = 408
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503

# Plages de statuts
HTTP_STATUS_SUCCESS_MIN = 200
HTTP_STATUS_SUCCESS_MAX = 300
HTTP_STATUS_ERROR_MIN = 400
HTTP_STATUS_ERROR_MAX = 599

# Limites par défaut
DEFAULT_PROVIDER_TIMEOUT_S = 10.0
DEFAULT_SEARCH_LIMIT = 8
SLUG_RESOLUTION_LIMIT = 5
