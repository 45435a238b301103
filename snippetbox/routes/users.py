"""
Snippetbox — Account Page Handlers
===================================

What:  Signup, login and logout.

Late validation failures:
    Some errors only show up once the store has been asked: an email that is
    already registered, or credentials that do not match. Both are turned
    back into form errors and sent down the same 422 re-render path as the
    rule checks, with the other submitted values kept. The password is never
    echoed back into the page.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.context import Application, get_application
from snippetbox.database import get_db_session
from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.forms import UserLoginForm, UserSignupForm
from snippetbox.routes.dependencies import authenticate, require_authentication
from snippetbox.session import login_user, logout_user, put_flash
from snippetbox.validator import EMAIL_RX, matches, min_chars, not_blank

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"], dependencies=[Depends(authenticate)])

PASSWORD_MIN_CHARS = 8


def validate_signup_form(form: UserSignupForm) -> None:
    form.check_field(not_blank(form.name), "name", "This field cannot be blank")
    form.check_field(not_blank(form.email), "email", "This field cannot be blank")
    form.check_field(
        matches(form.email, EMAIL_RX), "email", "This field must be a valid email address"
    )
    form.check_field(not_blank(form.password), "password", "This field cannot be blank")
    form.check_field(
        min_chars(form.password, PASSWORD_MIN_CHARS),
        "password",
        f"This field must be at least {PASSWORD_MIN_CHARS} characters long",
    )


def validate_login_form(form: UserLoginForm) -> None:
    form.check_field(not_blank(form.email), "email", "This field cannot be blank")
    form.check_field(
        matches(form.email, EMAIL_RX), "email", "This field must be a valid email address"
    )
    form.check_field(not_blank(form.password), "password", "This field cannot be blank")


def _rerender(
    request: Request, app_ctx: Application, page: str, form
) -> Response:
    form.password = ""
    data = app_ctx.new_template_data(request)
    data.form = form
    return app_ctx.render(request, 422, page, data)


@router.get("/signup", response_class=HTMLResponse, summary="Signup form")
async def user_signup(
    request: Request,
    app_ctx: Application = Depends(get_application),
) -> Response:
    data = app_ctx.new_template_data(request)
    data.form = UserSignupForm()
    return app_ctx.render(request, 200, "signup.html", data)


@router.post("/signup", response_class=HTMLResponse, summary="Create an account")
async def user_signup_post(
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    form = await app_ctx.decode_post_form(request, UserSignupForm)

    validate_signup_form(form)
    if not form.valid():
        return _rerender(request, app_ctx, "signup.html", form)

    try:
        await app_ctx.users.insert(db, form.name, form.email, form.password)
    except DuplicateEmailError:
        form.add_field_error("email", "Email address is already in use")
        return _rerender(request, app_ctx, "signup.html", form)

    put_flash(request, "Your signup was successful. Please log in.")
    return RedirectResponse(url="/user/login", status_code=303)


@router.get("/login", response_class=HTMLResponse, summary="Login form")
async def user_login(
    request: Request,
    app_ctx: Application = Depends(get_application),
) -> Response:
    data = app_ctx.new_template_data(request)
    data.form = UserLoginForm()
    return app_ctx.render(request, 200, "login.html", data)


@router.post("/login", response_class=HTMLResponse, summary="Log in")
async def user_login_post(
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    form = await app_ctx.decode_post_form(request, UserLoginForm)

    validate_login_form(form)
    if not form.valid():
        return _rerender(request, app_ctx, "login.html", form)

    try:
        user_id = await app_ctx.users.authenticate(db, form.email, form.password)
    except InvalidCredentialsError:
        form.add_non_field_error("Email or password is incorrect.")
        return _rerender(request, app_ctx, "login.html", form)

    login_user(request, user_id)
    logger.info("User %s logged in", user_id)
    return RedirectResponse(url="/snippet/create", status_code=303)


@router.post(
    "/logout",
    dependencies=[Depends(require_authentication)],
    summary="Log out",
)
async def user_logout_post(request: Request) -> Response:
    logout_user(request)
    put_flash(request, "You've been logged out successfully!")
    return RedirectResponse(url="/", status_code=303)
