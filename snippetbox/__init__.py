"""
Snippetbox — Application Package
=================================

What: A server-rendered web app for pasting and sharing short text snippets,
      with signup, login and one-shot flash messages.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes (HTML pages + redirects)   │  ← decode, validate, render
    ├─────────────────────────────────────┤
    │   Forms / Validator / Render        │  ← form pipeline, templates
    ├─────────────────────────────────────┤
    │   Services (SnippetService, Users)  │  ← SQL, password hashing
    ├─────────────────────────────────────┤
    │   Models & Database                 │  ← async SQLAlchemy
    └─────────────────────────────────────┘

    Handlers reach the layers below through one Application context
    (snippetbox.context), so tests can swap the stores for fakes.
"""

__version__ = "1.0.0"
