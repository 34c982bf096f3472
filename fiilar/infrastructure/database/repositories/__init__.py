"""SQLAlchemy-backed repository implementations.

Import the concrete module you need; this package does not re-export them so
that domain packages and repositories can import each other lazily.
"""
