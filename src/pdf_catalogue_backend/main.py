from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from .auth import AdminRoute
from .configuration import Settings, get_settings
from .database import PdfDatabase
from .errors import (
    DATABASE_ERROR,
    FRONTEND_MISSING,
    GENERATION_ERROR,
    UPLOAD_ERROR,
    CatalogueError,
    DownstreamFailure,
)
from .image_generator import GeneratorError, ImageGenerator
from .media_host import MediaHost, MediaHostError
from .models import (
    DeleteResult,
    ErrorBody,
    GeneratedImage,
    ImagePrompt,
    Liveness,
    PdfEntry,
    PdfEntryCreate,
    UploadResult,
)
from .utils import resolve_static_path

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {401: {"model": ErrorBody}, 422: {"model": ErrorBody}, 500: {"model": ErrorBody}}

api = APIRouter(prefix="/api", responses=ERROR_RESPONSES)
# Every route on this router is behind the admin credential.
admin = APIRouter(prefix="/api", responses=ERROR_RESPONSES, route_class=AdminRoute)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> PdfDatabase:
    return request.app.state.database


def get_media_host(request: Request) -> MediaHost:
    return request.app.state.media_host


def get_image_generator(request: Request) -> ImageGenerator:
    return request.app.state.image_generator


@api.get("/test", response_model=Liveness)
def liveness() -> Liveness:
    return Liveness(message="Connecté à la base de données !")


@api.get("/pdfs", response_model=List[PdfEntry])
def list_pdfs(database: PdfDatabase = Depends(get_database)) -> List[dict]:
    try:
        return database.list_entries()
    except sqlite3.Error as exc:
        logger.error(f"Listing catalogue failed: {exc}")
        raise DownstreamFailure(DATABASE_ERROR) from exc


@admin.post("/pdfs", response_model=PdfEntry)
def create_pdf(payload: PdfEntryCreate, database: PdfDatabase = Depends(get_database)) -> dict:
    try:
        return database.create_entry(payload.model_dump())
    except sqlite3.Error as exc:
        logger.error(f"Creating catalogue entry failed: {exc}")
        raise DownstreamFailure(str(exc)) from exc


@admin.delete("/pdfs/{entry_id}", response_model=DeleteResult)
def delete_pdf(entry_id: str, database: PdfDatabase = Depends(get_database)) -> DeleteResult:
    try:
        database.delete_entry(int(entry_id))
    except ValueError as exc:
        logger.error(f"Rejected catalogue id {entry_id!r}: {exc}")
        raise DownstreamFailure(str(exc)) from exc
    except sqlite3.Error as exc:
        logger.error(f"Deleting catalogue entry {entry_id} failed: {exc}")
        raise DownstreamFailure(str(exc)) from exc
    return DeleteResult(success=True)


@admin.post("/upload-pdf", response_model=UploadResult)
def upload_pdf(
    pdf: Optional[UploadFile] = File(None),
    media_host: MediaHost = Depends(get_media_host),
) -> UploadResult:
    if pdf is None:
        logger.error("Upload request carried no 'pdf' file part")
        raise DownstreamFailure(UPLOAD_ERROR)

    try:
        url = media_host.upload_pdf(pdf.file, pdf.filename)
    except MediaHostError as exc:
        raise DownstreamFailure(UPLOAD_ERROR) from exc
    return UploadResult(url=url)


@admin.post("/generate-image", response_model=GeneratedImage)
async def generate_image(
    body: ImagePrompt,
    generator: ImageGenerator = Depends(get_image_generator),
    media_host: MediaHost = Depends(get_media_host),
) -> GeneratedImage:
    try:
        image = await generator.generate(body.prompt)
        url = await run_in_threadpool(media_host.upload_data_url, image.as_data_url(), media_host.cover_folder)
    except (GeneratorError, MediaHostError, DownstreamFailure) as exc:
        logger.error(f"Cover generation failed: {exc}")
        raise DownstreamFailure(GENERATION_ERROR) from exc
    return GeneratedImage(image_url=url)


def serve_frontend(path: str, settings: Settings = Depends(get_app_settings)) -> FileResponse:
    """Serve a front-end asset, or index.html for any other path."""
    target = resolve_static_path(settings.static.directory, path)
    if target is None:
        target = settings.static.index_path
        if not target.is_file():
            logger.error(f"Front-end index missing at {target}")
            raise DownstreamFailure(FRONTEND_MISSING)
    return FileResponse(target)


async def _catalogue_error_handler(request: Request, exc: CatalogueError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=422, content={"error": "; ".join(messages)})


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[PdfDatabase] = None,
    media_host: Optional[MediaHost] = None,
    image_generator: Optional[ImageGenerator] = None,
) -> FastAPI:
    """
    Build the API with its collaborators.

    Any collaborator left out is built from ``settings``. Routes are matched
    in declaration order and the front-end fallback is registered last, so it
    only answers GET requests no API route claims.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(title="PDF Catalogue API", version="0.1.0")
    app.state.settings = settings
    app.state.database = database if database is not None else PdfDatabase(settings.database.path)
    app.state.media_host = media_host if media_host is not None else MediaHost(settings.media)
    app.state.image_generator = (
        image_generator if image_generator is not None else ImageGenerator(settings.generator)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CatalogueError, _catalogue_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(api)
    app.include_router(admin)
    app.add_api_route("/{path:path}", serve_frontend, methods=["GET"], include_in_schema=False)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.logging.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting server on port {settings.server.port}")
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)
