# Services package init
"""
Snippetbox — Services Layer
============================

Service Inventory:
    - SnippetService: insert, fetch one unexpired snippet, list the latest
    - UserService:    create accounts (bcrypt), authenticate, existence check

Each method takes the request's AsyncSession as its first argument and
commits its own writes.
"""
