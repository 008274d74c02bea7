"""Use-case layer wrapping snapshot gateway operations.

Each module coordinates domain checks and one port call without performing
transport I/O directly, and maps failures to ``UseCaseError``.
"""
