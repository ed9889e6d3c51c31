"""
FastAPI application bootstrap with: \n
- Lifespan-managed initialization of the chat store (open/create on startup, close on shutdown) \n
- CORS configured per environment (dev origins or the production frontend) \n
- Request body size limit \n
- Per-request logging outside production \n
- Chat and health routers plus a service info route \n

Environment contract (from `settings`): \n
- ENVIRONMENT: 'production' switches CORS to FRONTEND_URL and silences request logs. \n
- DATABASE_PATH: SQLite file of the chat store. \n
- MAX_BODY_BYTES: largest accepted request body. \n
- HOST / PORT / LOG_LEVEL: used by `run()`. \n
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from support_backend import __version__
from support_backend.api.exception_handlers import make_error_response, register_exception_handlers
from support_backend.api.fast_api import health_router, router
from support_backend.api.llm_pipeline import ReplyGenerator
from support_backend.database.config.config import Settings, settings as default_settings
from support_backend.database.core.store import ChatStore
from support_backend.services.chat_service import ChatService

logger = logging.getLogger(__name__)
"""Logger instance for application lifecycle and request logs."""

SERVICE_INFO = {
    "name": "AI Support Agent API",
    "version": __version__,
    "description": "Backend API for TechStyle AI Live Chat Support",
    "endpoints": {
        "health": "GET /health",
        "chat": {
            "sendMessage": "POST /chat/message",
            "getHistory": "GET /chat/history/:sessionId",
            "newConversation": "POST /chat/new",
        },
    },
}


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ChatStore] = None,
    generator: Optional[ReplyGenerator] = None,
) -> FastAPI:
    """
    Build the application and its collaborators.

    Parameters
    ----------
    settings : Settings | None
        Configuration; the process-wide `settings` when omitted.
    store : ChatStore | None
        Store to serve from; a `ChatStore` at `settings.DATABASE_PATH` when omitted.
    generator : ReplyGenerator | None
        Reply generator; built from `settings` when omitted.

    Notes
    -----
    The store is initialized in the lifespan startup phase. On shutdown the
    generator releases its HTTP client and the store is closed.
    """
    settings = settings or default_settings
    store = store or ChatStore(settings.DATABASE_PATH)
    generator = generator or ReplyGenerator(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.initialize()
        logger.info(
            "Support backend ready (environment=%s, database=%s)",
            settings.ENVIRONMENT,
            ":memory:" if store.in_memory else settings.DATABASE_PATH,
        )
        try:
            yield
        finally:
            await generator.aclose()
            store.close()
            logger.info("Support backend shut down")

    app = FastAPI(title=SERVICE_INFO["name"], version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.generator = generator
    app.state.chat_service = ChatService(store, generator, settings)

    # -----------------------
    # Body size limit
    # -----------------------
    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > settings.MAX_BODY_BYTES:
            return make_error_response(
                status_code=413,
                error="Payload Too Large",
                message=f"Request body exceeds {settings.MAX_BODY_BYTES} bytes",
                code="PAYLOAD_TOO_LARGE",
            )
        return await call_next(request)

    # -----------------------
    # Request logging (development only)
    # -----------------------
    if not settings.is_production:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.info("%s %s", request.method, request.url.path)
            return await call_next(request)

    # -----------------------
    # CORS configuration (outermost, so every response carries CORS headers)
    # -----------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, show_tracebacks=not settings.is_production)

    # -----------------------
    # API routes
    # -----------------------
    app.include_router(health_router)
    app.include_router(router)

    @app.get("/")
    async def service_info():
        """Describe the service and its endpoints."""
        return SERVICE_INFO

    return app


logging.basicConfig(
    level=default_settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
"""Application served by uvicorn (`support_backend.main:app`)."""


def run() -> None:
    """Console entry point: serve `app` with uvicorn on HOST:PORT."""
    uvicorn.run(
        app,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
