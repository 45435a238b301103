"""
Snippetbox — Application Context
=================================

What:  The one object holding everything handlers share: the template
       renderer, the form decoder and the two stores.
How:   `create_app()` builds it once and stores it on `app.state.application`;
       handlers receive it through the `get_application` dependency. Nothing
       here is module-global, so tests build their own context with fake stores.
"""

import logging
from dataclasses import dataclass, field
from typing import Type, TypeVar

from fastapi import Request
from fastapi.responses import HTMLResponse

from snippetbox.forms import Form, FormDecoder, decode_post_form
from snippetbox.render import TemplateData, TemplateRenderer
from snippetbox.services.snippet_service import SnippetService
from snippetbox.services.user_service import UserService
from snippetbox.session import peek_flash, pop_flash

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Form)


@dataclass
class Application:
    renderer: TemplateRenderer
    snippets: SnippetService = field(default_factory=SnippetService)
    users: UserService = field(default_factory=UserService)
    form_decoder: FormDecoder = field(default_factory=FormDecoder)

    def new_template_data(self, request: Request) -> TemplateData:
        """
        Envelope with the per-request defaults filled in.

        The pending flash is copied in but stays in the session until
        `render` has produced the page.
        """
        return TemplateData(
            flash=peek_flash(request),
            is_authenticated=bool(getattr(request.state, "is_authenticated", False)),
        )

    def render(
        self, request: Request, status_code: int, page: str, data: TemplateData
    ) -> HTMLResponse:
        """
        Render `page` and clear the flash it displayed.

        The flash is removed only once the page rendered, so a template failure
        (a 500) leaves it in place for the next page.
        """
        response = self.renderer.render(status_code, page, data)
        if data.flash:
            pop_flash(request)
        return response

    async def decode_post_form(self, request: Request, form_cls: Type[F]) -> F:
        return await decode_post_form(request, form_cls, self.form_decoder)


def get_application(request: Request) -> Application:
    """FastAPI dependency returning the context built by create_app()."""
    return request.app.state.application
