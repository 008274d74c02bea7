"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of domain ports: the snapshot REST client, the
    local preferences store, and an in-memory snapshot double.

Dependencies:
    ``requests`` for HTTP, the filesystem for preferences.

Call context:
    Imported by ``snapview.app.controller`` for runtime wiring and by tests
    for transport-level behavior checks.
"""
