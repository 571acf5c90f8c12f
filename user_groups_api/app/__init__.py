"""
Application package.

``main`` builds the FastAPI app; ``core`` holds configuration, logging,
errors and database access; ``services`` holds the SQL; ``schemas``
the request and response models; ``api`` the routers.
"""

from .main import app  # noqa: F401
