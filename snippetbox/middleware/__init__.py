# Middleware package init
"""
Snippetbox — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Secure Headers] → [Session] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: one access line per request, with status and duration
    3. Secure Headers: hardening headers on pages, redirects and handled errors
    4. Session: Starlette's signed-cookie SessionMiddleware (request.session)
"""
