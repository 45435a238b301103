"""
Snippetbox — Template Rendering
================================

What:  The page template cache and the `TemplateData` envelope handed to every
       template.
How:   Every file in `<templates_dir>/pages/` is compiled once at startup with
       a shared Jinja2 Environment. Pages extend `base.html` and include
       `partials/*`. Rendering produces the whole page as a string before any
       response is built, so a failure half-way through becomes a clean 500
       instead of a truncated page.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from snippetbox.exceptions import TemplateNotFoundError, TemplateRenderError

logger = logging.getLogger(__name__)

HUMAN_DATE_FORMAT = "%d %b %Y at %H:%M"


def human_date(value: Optional[datetime]) -> str:
    """Format a timestamp for display in UTC, e.g. '17 Oct 2026 at 09:15'."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(HUMAN_DATE_FORMAT)


@dataclass
class TemplateData:
    """
    The data envelope passed to every template.

    Attributes:
        current_year:     For the footer
        form:             The form being shown (fresh, or with errors)
        flash:            One-shot message from the previous request
        snippet:          The snippet on the view page
        snippets:         The list on the home page
        is_authenticated: Drives the nav links
    """

    current_year: int = field(default_factory=lambda: datetime.now(timezone.utc).year)
    form: Any = None
    flash: str = ""
    snippet: Any = None
    snippets: List[Any] = field(default_factory=list)
    is_authenticated: bool = False

    def as_context(self) -> Dict[str, Any]:
        return {
            "current_year": self.current_year,
            "form": self.form,
            "flash": self.flash,
            "snippet": self.snippet,
            "snippets": self.snippets,
            "is_authenticated": self.is_authenticated,
        }


def build_environment(templates_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["human_date"] = human_date
    return env


class TemplateRenderer:
    """
    Compiled page templates keyed by file name ("home.html", "view.html", ...).

    The cache is filled once and only read afterwards, so one renderer is
    shared by all requests.
    """

    def __init__(self, templates_dir: Path | str):
        self.templates_dir = Path(templates_dir)
        self.environment = build_environment(self.templates_dir)
        self.cache: Dict[str, Template] = self._build_cache()

    def _build_cache(self) -> Dict[str, Template]:
        pages_dir = self.templates_dir / "pages"
        cache: Dict[str, Template] = {}
        for page in sorted(pages_dir.glob("*.html")):
            cache[page.name] = self.environment.get_template(f"pages/{page.name}")
        logger.info("Template cache built: %d pages from %s", len(cache), pages_dir)
        return cache

    def render_to_string(self, page: str, data: TemplateData) -> str:
        """
        Raises:
            TemplateNotFoundError: no compiled template for `page`.
            TemplateRenderError: the template raised while executing. Any
                exception counts: the page is never partially written.
        """
        template = self.cache.get(page)
        if template is None:
            raise TemplateNotFoundError(page)

        try:
            return template.render(data.as_context())
        except Exception as e:
            raise TemplateRenderError(
                page=page,
                message=f"Rendering {page} failed: {e}",
                context={"error_type": type(e).__name__},
            ) from e

    def render(self, status_code: int, page: str, data: TemplateData) -> HTMLResponse:
        body = self.render_to_string(page, data)
        return HTMLResponse(content=body, status_code=status_code)

