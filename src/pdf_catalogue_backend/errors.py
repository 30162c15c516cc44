"""
Failure taxonomy for the catalogue API.

Every error that reaches a client is a CatalogueError and is rendered as
``{"error": <message>}`` with the error's status code.
"""

from __future__ import annotations

ACCESS_DENIED = "Accès refusé"
DATABASE_ERROR = "Erreur base de données"
UPLOAD_ERROR = "Erreur upload PDF"
GENERATION_ERROR = "Erreur génération image"
FRONTEND_MISSING = "Page d'accueil introuvable"


class CatalogueError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationFailure(CatalogueError):
    """Missing or wrong admin credential."""

    status_code = 401

    def __init__(self, message: str = ACCESS_DENIED):
        super().__init__(message)


class DownstreamFailure(CatalogueError):
    """The store, the media host or the image generator failed."""

    status_code = 500


class StructuralFailure(DownstreamFailure):
    """The image generator answered without the expected inline image."""
