"""
Users API — Application Package Initializer
============================================

What: Marks the `users_api` directory as a Python package.
Why:  Enables module imports like `from users_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service follows a two-layer design:

    ┌─────────────────────────────────────┐
    │     Routes + Validation (HTTP)      │  ← status codes, bodies, field rules
    ├─────────────────────────────────────┤
    │     UserService (Persistence)       │  ← parameterized statements
    ├─────────────────────────────────────┤
    │     Database (engine lifecycle)     │  ← async SQLAlchemy engine/sessions
    └─────────────────────────────────────┘

    Routes never build SQL; the persistence layer never builds HTTP responses.
"""

__version__ = "1.0.0"
