"""Helpers shared by the CLI and the catalog.

- validators.py: boundary checks for titles, authors and user names
- ui_helpers.py: plain/json/rich rendering of CLI results
"""
