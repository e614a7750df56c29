"""Server — request dispatch, failure containment, and the ASGI transport."""
