"""
Snippetbox — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance,
       built around one Application context (renderer, stores, decoder).
Who:   Called by uvicorn to start the server (uvicorn snippetbox.main:app),
       or through `python -m snippetbox.main` / the `snippetbox` script.

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate security-sensitive configuration
    3. Wait for the database (retried; startup aborts if it never answers)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import http
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from snippetbox import __version__
from snippetbox.config import settings
from snippetbox.context import Application
from snippetbox.database import dispose_engine, wait_for_database
from snippetbox.exceptions import (
    ClientInputError,
    InvalidDecoderTargetError,
    LoginRequired,
    NotFoundError,
    SnippetboxError,
)
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware, request_id_var
from snippetbox.middleware.secure_headers import SecureHeadersMiddleware
from snippetbox.render import TemplateRenderer
from snippetbox.routes import health, snippets, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's own access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Snippetbox %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await wait_for_database()
    except Exception:
        logger.critical("Database unreachable; aborting startup", exc_info=True)
        raise
    logger.info("Database connection verified")

    scheme = "https" if settings.tls_enabled else "http"
    logger.info("Server ready at %s://%s:%d", scheme, settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Snippetbox shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Error Responders
# ══════════════════════════════════════════════════════════════════════════

def status_text_response(
    status_code: int, headers: Optional[Dict[str, str]] = None
) -> PlainTextResponse:
    """Plain-text body holding only the standard reason phrase, e.g. 'Not Found'."""
    return PlainTextResponse(
        http.HTTPStatus(status_code).phrase, status_code=status_code, headers=headers
    )


def server_error(request: Request, exc: BaseException, close: bool = False) -> PlainTextResponse:
    """
    The single responder for every server-side failure.

    Logs the error with its context and stack trace; the client gets a bare
    500 with no detail. `close` asks the client to drop the connection, used
    when the failure was not one the application anticipated.
    """
    rid = request_id_var.get("")
    context = getattr(exc, "context", {})
    logger.error(
        "[%s] %s %s failed: %s: %s | Context: %s",
        rid,
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        context,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    headers = {"Connection": "close"} if close else None
    return status_text_response(500, headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to responses.

    Handler hierarchy:
        ClientInputError            → its status (400 by default), plain text
        NotFoundError               → 404 plain text
        StarletteHTTPException      → its status (unknown route 404, wrong method 405)
        LoginRequired               → 303 redirect to the login page
        InvalidDecoderTargetError   → 500, connection closed (programmer error)
        SnippetboxError (base)      → 500 (DatabaseError, template errors)
        Exception (fallback)        → 500, connection closed

    Validation failures never arrive here: handlers re-render the form.
    """

    @app.exception_handler(ClientInputError)
    async def handle_client_input_error(request: Request, exc: ClientInputError):
        rid = request_id_var.get("")
        logger.warning("[%s] Client error: %s | Context: %s", rid, exc.message, exc.context)
        return status_text_response(exc.status_code)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return status_text_response(404)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return status_text_response(exc.status_code, getattr(exc, "headers", None))

    @app.exception_handler(LoginRequired)
    async def handle_login_required(request: Request, exc: LoginRequired):
        return RedirectResponse(url=exc.redirect_to, status_code=303)

    @app.exception_handler(InvalidDecoderTargetError)
    async def handle_invalid_decoder_target(request: Request, exc: InvalidDecoderTargetError):
        return server_error(request, exc, close=True)

    @app.exception_handler(SnippetboxError)
    async def handle_snippetbox_error(request: Request, exc: SnippetboxError):
        return server_error(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        return server_error(request, exc, close=True)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(application: Optional[Application] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        application: Context to serve with. Built from settings when omitted;
            tests pass one with fake stores.
    """
    if application is None:
        application = Application(renderer=TemplateRenderer(settings.templates_dir))

    app = FastAPI(
        title="Snippetbox",
        description="Paste and share short text snippets.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.application = application

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → SecureHeaders → Session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie="session",
        max_age=settings.session_lifetime,
        same_site="lax",
        https_only=settings.session_cookie_https_only,
    )
    app.add_middleware(SecureHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    static_dir = Path(settings.static_dir)
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    app.include_router(snippets.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Serve `app` with uvicorn, over TLS when a certificate and key are configured."""
    uvicorn.run(
        "snippetbox.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        ssl_certfile=settings.tls_cert_file if settings.tls_enabled else None,
        ssl_keyfile=settings.tls_key_file if settings.tls_enabled else None,
        timeout_keep_alive=60,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
