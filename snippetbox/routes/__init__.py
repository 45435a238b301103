# Routes package init
"""
Snippetbox — Routes Package
============================

Route Inventory:
    - snippets.py:  GET  /                      (latest snippets)
                    GET  /snippet/view/{id}     (one snippet)
                    GET  /snippet/create        (form, login required)
                    POST /snippet/create        (submit, login required)
    - users.py:     GET  /user/signup, POST /user/signup
                    GET  /user/login,  POST /user/login
                    POST /user/logout           (login required)
    - health.py:    GET  /health                (service health check)

Routes stay thin: decode the form, run the rules, call a store, then either
re-render the page with errors or redirect.
"""
