"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import Settings, get_settings
from src.core.exceptions import ChatError, InvalidRequestError
from src.core.gemini import GeminiClient, ResponseSource, get_gemini_client
from src.core.rate_limiter import RateLimiter
from src.features.chat.memory import SessionStore
from src.features.chat.router import router as chat_router
from src.features.chat.service import ChatService
from src.features.widget.router import router as widget_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting Embeddable Chatbot Server in {settings.app_env} mode")
    logger.info(f"Widget embed URL: http://localhost:{settings.app_port}/embed.js")
    if not app.state.chat_service.ai_available:
        logger.warning("AI backend not configured. Chat will use fallback responses.")
    yield
    logger.info("Shutting down Embeddable Chatbot Server")
    source = app.state.chat_service.source
    if isinstance(source, GeminiClient):
        await source.aclose()


def create_app(
    settings: Settings | None = None,
    response_source: ResponseSource | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use (defaults to environment settings)
        response_source: AI backend (defaults to a Gemini client from settings)
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Embeddable Chatbot",
        description="Website chat widget backed by Gemini with canned fallbacks",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
    )

    # Process-scoped state
    if response_source is None:
        response_source = get_gemini_client(settings)
    session_store = SessionStore()
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter(
        window_ms=settings.rate_limit_window_ms,
        max_requests=settings.rate_limit_max_requests,
    )
    app.state.session_store = session_store
    app.state.chat_service = ChatService(
        store=session_store,
        source=response_source,
        history_window=settings.history_window,
        max_idle=timedelta(seconds=settings.session_max_idle_seconds),
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Static files for widget and demo page
    app.mount("/widget", StaticFiles(directory=STATIC_DIR / "widget"), name="widget")
    app.mount("/demo", StaticFiles(directory=STATIC_DIR / "demo", html=True), name="demo")

    # Include routers
    app.include_router(chat_router)
    app.include_router(widget_router)

    # Health check endpoint
    @app.get("/api/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
        }

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return await chat_error_handler(request, InvalidRequestError())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Endpoint not found", "path": request.url.path},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception):
        logger.exception(f"Server error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.is_development else "Something went wrong",
            },
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
    )
