"""
Catalog package for the book explorer.

This package holds the Open Library search client, the search page's
view/state machine and the routes that serve that page. The client is
the only component that makes network calls; the view owns all page
state and renders it through the templates in ``templates/``.
"""

from .router import router as catalog_router  # noqa: F401
