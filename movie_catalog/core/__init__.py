"""
Core application utilities for settings, errors, logging and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Error types shared by the repository and API layers
- Dependency helpers (request-scoped DB session, movie repository)
"""
