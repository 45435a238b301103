"""
Snippetbox — Snippet Page Handlers
===================================

What:  Home page, snippet view, and the create-snippet form (GET + POST).

Create flow (POST /snippet/create):
    Decoding   → malformed body: 400, stop
    Validating → any rule fails: re-render create.html at 422 with the form, stop
    Resolved   → insert, flash, 303 to /snippet/view/<id>

    Redirecting after a successful POST (instead of rendering) means a browser
    refresh of the result page does not submit the form a second time.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.context import Application, get_application
from snippetbox.database import get_db_session
from snippetbox.exceptions import NotFoundError
from snippetbox.forms import SnippetCreateForm
from snippetbox.routes.dependencies import authenticate
from snippetbox.session import put_flash
from snippetbox.validator import max_chars, not_blank, permitted_int

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Snippets"], dependencies=[Depends(authenticate)])

TITLE_MAX_CHARS = 100
CONTENT_MAX_CHARS = 400
PERMITTED_EXPIRES = (1, 7, 365)


def validate_snippet_create_form(form: SnippetCreateForm) -> None:
    """Run the create-snippet rules in order; errors accumulate on the form."""
    form.check_field(not_blank(form.title), "title", "This field cannot be blank")
    form.check_field(
        max_chars(form.title, TITLE_MAX_CHARS),
        "title",
        f"This field cannot be more than {TITLE_MAX_CHARS} characters long",
    )
    form.check_field(not_blank(form.content), "content", "This field cannot be blank")
    form.check_field(
        max_chars(form.content, CONTENT_MAX_CHARS),
        "content",
        f"This field cannot be more than {CONTENT_MAX_CHARS} characters long",
    )
    form.check_field(
        permitted_int(form.expires, *PERMITTED_EXPIRES),
        "expires",
        "This field must equal 1, 7 or 365",
    )


@router.get("/", response_class=HTMLResponse, summary="Latest snippets")
async def home(
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    snippets = await app_ctx.snippets.latest(db)

    data = app_ctx.new_template_data(request)
    data.snippets = snippets
    return app_ctx.render(request, 200, "home.html", data)


@router.get("/snippet/view/{snippet_id}", response_class=HTMLResponse, summary="View a snippet")
async def snippet_view(
    snippet_id: str,
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Show one snippet.

    The id is taken as a raw string and parsed here: anything that is not a
    positive integer is a 404, the same as an id that does not exist.
    """
    try:
        parsed_id = int(snippet_id)
    except ValueError:
        parsed_id = 0
    if parsed_id < 1:
        raise NotFoundError(resource="snippet", resource_id=snippet_id)

    snippet = await app_ctx.snippets.get(db, parsed_id)

    data = app_ctx.new_template_data(request)
    data.snippet = snippet
    return app_ctx.render(request, 200, "view.html", data)


@router.get(
    "/snippet/create",
    response_class=HTMLResponse,
    summary="New snippet form",
)
async def snippet_create(
    request: Request,
    app_ctx: Application = Depends(get_application),
) -> Response:
    data = app_ctx.new_template_data(request)
    data.form = SnippetCreateForm(expires=365)

    response = app_ctx.render(request, 200, "create.html", data)
    response.headers["Cache-Control"] = "no-store"
    return response


@router.post(
    "/snippet/create",
    response_class=HTMLResponse,
    summary="Create a snippet",
)
async def snippet_create_post(
    request: Request,
    app_ctx: Application = Depends(get_application),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    form = await app_ctx.decode_post_form(request, SnippetCreateForm)

    validate_snippet_create_form(form)

    if not form.valid():
        logger.info("Snippet form rejected: %s", sorted(form.field_errors))
        data = app_ctx.new_template_data(request)
        data.form = form
        response = app_ctx.render(request, 422, "create.html", data)
        response.headers["Cache-Control"] = "no-store"
        return response

    snippet_id = await app_ctx.snippets.insert(db, form.title, form.content, form.expires)

    put_flash(request, "Snippet successfully created!")
    return RedirectResponse(url=f"/snippet/view/{snippet_id}", status_code=303)
