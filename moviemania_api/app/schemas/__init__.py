"""
Pydantic schema definitions for API payloads.

Each entity (movies, series, admins, sessions, notifications) defines
its own models.  Request bodies are validated through
``validation.parse_payload`` so that a missing or malformed field
surfaces as a 400 ``InvalidInput`` rather than FastAPI's 422.
"""
