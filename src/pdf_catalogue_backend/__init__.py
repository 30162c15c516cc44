"""
PDF Catalogue Backend - REST API for a catalogue of PDF documents

This package provides a FastAPI-based web service that:

- Lists catalogue entries (public), newest first
- Creates and deletes entries behind an admin bearer token
- Uploads PDF files to an S3-compatible media host
- Generates cover images through a generative-content API
- Serves the front-end, falling back to index.html for unknown paths

Key Components:
    - main: FastAPI application factory and HTTP endpoint definitions
    - auth: Admin credential gate
    - database: SQLite persistence for catalogue entries
    - media_host: Object uploads and public URLs
    - image_generator: Prompt-to-image client
    - configuration: Settings loading (YAML defaults + environment)
    - errors: Failure taxonomy rendered as ``{"error": ...}``

Usage:
    Run the API server with:
        uvicorn pdf_catalogue_backend.main:app --reload --host 0.0.0.0 --port 3000

    Or use the console script:
        pdf-catalogue-backend
"""
