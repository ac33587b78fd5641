"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that several features use (store wiring,
pagination, payload validation, the error boundary). Feature-specific SQL and
business logic stay in the feature package (e.g. `songs/`).
"""
