"""
Top-level package for the spreadsheet comparison browser.

Most code should import from submodules such as:
    xls_browser.core
    xls_browser.services
    xls_browser.views
    xls_browser.ui
"""

__all__: list[str] = []
