"""
API route modules.

This package contains subrouters for:
- Movies: list, get, add, edit and delete catalog entries

Routers are included from movie_catalog.api.main (under the /api/v1 prefix).
"""
