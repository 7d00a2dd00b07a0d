"""
Lingo API Package.

FastAPI application exposing the Lingo localization service.
"""
