"""
Lingo Database Package.

SQLAlchemy models, session management and migrations
for the Lingo localization service.
"""

from .models import Base
from .session import close_database, get_session, init_database

__all__ = [
    "Base",
    "init_database",
    "close_database",
    "get_session",
]
