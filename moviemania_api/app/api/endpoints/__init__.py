"""
Endpoint modules.

Each module defines an APIRouter for one entity; they are aggregated in
``api/router.py`` and included in the application.
"""
