"""
Service layer abstraction.

Each service encapsulates business logic for one entity and talks to
storage only through ``core.db``, so switching between the JSON file
and MongoDB backends does not affect API handlers.
"""
