"""Database package."""

from splitter.database.base import Base
from splitter.database.session import DatabaseSessionManager, sessionmanager
from splitter.database import models

__all__ = ["Base", "DatabaseSessionManager", "sessionmanager", "models"]
