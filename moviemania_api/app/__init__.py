"""
Application package initializer.

The project is organised by layer: ``core`` holds configuration,
logging, security and storage; ``schemas`` the Pydantic models;
``services`` the business logic per entity; ``api`` the routers.
"""

from .main import app  # noqa: F401
