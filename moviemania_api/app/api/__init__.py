"""
API package.

``router`` aggregates the entity routers from ``endpoints``.  Paths are
declared in full inside each endpoint module because the public URL
layout (``/api/movies``, ``/update/movie/{id}``, ``/upload-poster``)
does not follow a single prefix.
"""
