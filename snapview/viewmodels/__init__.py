"""ViewModel package for UI state and command surfaces.

Call context:
    ``snapview/web_ui/runtime.py`` builds these viewmodels and NiceGUI pages
    in ``snapview/web_ui/main.py`` read their projections when refreshing.

Dependencies:
    Modules in this package depend on domain types and lightweight formatting
    helpers only. I/O adapters and use-case orchestration remain outside.
"""
