"""
Snippetbox — Session Helpers
=============================

What:  Small accessors over `request.session` for the flash message and the
       logged-in user.
How:   Starlette's SessionMiddleware keeps the session in a signed cookie
       (itsdangerous); these helpers are the only code that knows the keys.

Flash semantics:
    A flash is written by one request (usually just before a redirect) and
    removed by the next request that successfully renders a page. A page
    that fails to render leaves it in place.
"""

from typing import Optional

from starlette.requests import Request

FLASH_KEY = "flash"
AUTH_USER_KEY = "authenticated_user_id"


def put_flash(request: Request, message: str) -> None:
    request.session[FLASH_KEY] = message


def peek_flash(request: Request) -> str:
    """Return the pending flash message (empty string when none) without clearing it."""
    return request.session.get(FLASH_KEY, "")


def pop_flash(request: Request) -> str:
    """Return the pending flash message (empty string when none) and clear it."""
    return request.session.pop(FLASH_KEY, "")


def authenticated_user_id(request: Request) -> Optional[int]:
    value = request.session.get(AUTH_USER_KEY)
    return int(value) if value is not None else None


def login_user(request: Request, user_id: int) -> None:
    """
    Record a successful login.

    The previous session contents are dropped first so nothing set while
    anonymous carries over into the authenticated session.
    """
    request.session.clear()
    request.session[AUTH_USER_KEY] = user_id


def logout_user(request: Request) -> None:
    request.session.pop(AUTH_USER_KEY, None)
