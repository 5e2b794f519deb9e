"""
Top-level package for the MovieMania API.

All functionality lives in submodules under ``app``; this marker lets
modules be imported with fully qualified names such as
``moviemania_api.app.main``.
"""

__all__ = []
