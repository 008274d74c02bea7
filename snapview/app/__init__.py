"""Application composition layer for the snapshot browser.

Controllers in this package wire adapters and use cases from settings state
without placing business logic in views.
"""
