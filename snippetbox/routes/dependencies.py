"""
Snippetbox — Shared Route Dependencies
=======================================

What:  The authentication steps every HTML route goes through.

    authenticate            : runs on every page route. Marks the request as
                              authenticated only when the session's user id
                              still belongs to an existing account (a deleted
                              account must not stay logged in via its cookie).
    require_authentication  : gate for actions that need a login (logout). Raises
                              LoginRequired, which main.py turns into a 303
                              redirect to the login page.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.context import Application, get_application
from snippetbox.database import get_db_session
from snippetbox.exceptions import LoginRequired
from snippetbox.session import authenticated_user_id

logger = logging.getLogger(__name__)


async def authenticate(
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> bool:
    user_id = authenticated_user_id(request)
    is_authenticated = False
    if user_id is not None:
        is_authenticated = await app_ctx.users.exists(db, user_id)
        if not is_authenticated:
            logger.info("Session refers to missing user %s; treating as anonymous", user_id)
    request.state.is_authenticated = is_authenticated
    request.state.user_id = user_id if is_authenticated else None
    return is_authenticated


async def require_authentication(
    is_authenticated: bool = Depends(authenticate),
) -> None:
    if not is_authenticated:
        raise LoginRequired()
