"""
docdrop API
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse

from docdrop.config import Settings, settings as default_settings
from docdrop.exceptions import DocumentStoreError
from docdrop.models import CreateOptions, StoreStatus
from docdrop.services import DocumentManager
from docdrop.utils.logging import setup_logging

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


def get_documents(request: Request) -> DocumentManager:
    return request.app.state.documents


def iter_file(handle, chunk_size: int = READ_CHUNK_SIZE):
    """Yield the rest of an open file in chunks, then close it."""
    with handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            yield chunk


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around a settings object."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)
        documents = DocumentManager(settings)
        await documents.bootstrap()
        app.state.documents = documents
        yield
        await documents.shutdown()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Ephemeral anonymous document store",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocumentStoreError)
    async def document_store_error_handler(request: Request, exc: DocumentStoreError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.detail)
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    @app.get("/", response_model=StoreStatus)
    async def root(documents: DocumentManager = Depends(get_documents)):
        """Health check endpoint."""
        return StoreStatus(
            status="healthy",
            service=settings.APP_NAME,
            version=settings.APP_VERSION,
            document_count=documents.document_count,
            max_document_count=settings.MAX_DOC_COUNT,
        )

    @app.post("/", response_class=PlainTextResponse)
    async def create_document(
        request: Request,
        doc_lifetime: str | None = Header(default=None, description='Lifetime, e.g. "168h"'),
        doc_name_charset: str | None = Header(default=None, description="Name alphabet"),
        doc_name_length: str | None = Header(default=None, description="Name length"),
        documents: DocumentManager = Depends(get_documents),
    ):
        """
        Store the raw request body as a new document.

        Returns the generated name as plain text. The document is deleted
        once its lifetime elapses.
        """
        options = CreateOptions.from_headers(
            lifetime=doc_lifetime,
            charset=doc_name_charset,
            length=doc_name_length,
        )
        name = await documents.create(request.stream(), options)
        return PlainTextResponse(name)

    @app.get("/{name}")
    async def read_document(name: str, documents: DocumentManager = Depends(get_documents)):
        """Stream a stored document."""
        handle = await documents.read(name)
        return StreamingResponse(iter_file(handle), media_type="application/octet-stream")

    return app


app = create_app()


def run() -> None:
    """Serve the application on LISTEN_ADDR."""
    import uvicorn

    host, port = default_settings.listen_host_port()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
