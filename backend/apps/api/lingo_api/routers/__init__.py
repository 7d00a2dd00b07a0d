"""
API router modules.

This package contains all API route handlers organized by domain.
"""

from . import exports, imports, languages, projects, translations, users

__all__ = [
    "languages",
    "translations",
    "projects",
    "users",
    "exports",
    "imports",
]
