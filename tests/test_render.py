"""
Snippetbox — Template Rendering Unit Tests
===========================================

What we test:
    ✅ Every page is compiled into the cache at construction
    ✅ Rendering is deterministic for the same page and data
    ✅ Unknown page → TemplateNotFoundError
    ✅ A template that fails mid-render → TemplateRenderError
    ✅ human_date formatting
"""

from datetime import datetime, timedelta, timezone

import pytest

from snippetbox.exceptions import TemplateNotFoundError, TemplateRenderError
from snippetbox.forms import SnippetCreateForm
from snippetbox.render import TemplateData, TemplateRenderer, human_date


class TestTemplateRenderer:
    def test_cache_holds_every_page(self, renderer):
        assert set(renderer.cache) == {
            "create.html",
            "home.html",
            "login.html",
            "signup.html",
            "view.html",
        }

    def test_render_is_deterministic(self, renderer, sample_snippet):
        data = TemplateData(current_year=2026, snippet=sample_snippet, flash="Saved")

        first = renderer.render_to_string("view.html", data)
        second = renderer.render_to_string("view.html", data)

        assert first == second
        assert "An old silent pond" in first
        assert "Saved" in first

    def test_missing_page_raises(self, renderer):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            renderer.render_to_string("nope.html", TemplateData())

        assert exc_info.value.page == "nope.html"

    def test_render_failure_is_wrapped(self, tmp_path):
        pages = tmp_path / "pages"
        pages.mkdir()
        (pages / "boom.html").write_text("{{ snippet.title.upper() }}")
        renderer = TemplateRenderer(tmp_path)

        with pytest.raises(TemplateRenderError):
            renderer.render_to_string("boom.html", TemplateData(snippet=None))

    def test_render_returns_html_response(self, renderer):
        response = renderer.render(422, "create.html", TemplateData(form=SnippetCreateForm(expires=365)))

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("text/html")
        assert b'value="365" checked' in response.body

    def test_output_is_autoescaped(self, renderer):
        form = SnippetCreateForm(title="<script>alert(1)</script>")

        body = renderer.render_to_string("create.html", TemplateData(form=form))

        assert "<script>alert(1)</script>" not in body
        assert "&lt;script&gt;" in body

    def test_empty_home_page(self, renderer):
        body = renderer.render_to_string("home.html", TemplateData())

        assert "There's nothing to see here... yet!" in body


class TestHumanDate:
    def test_formats_in_utc(self):
        value = datetime(2026, 10, 17, 10, 15, tzinfo=timezone(timedelta(hours=1)))

        assert human_date(value) == "17 Oct 2026 at 09:15"

    def test_naive_values_are_treated_as_utc(self):
        assert human_date(datetime(2026, 1, 2, 3, 4)) == "02 Jan 2026 at 03:04"

    def test_none_is_empty(self):
        assert human_date(None) == ""
