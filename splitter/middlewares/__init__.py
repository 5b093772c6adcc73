"""Middlewares package."""

from splitter.middlewares.database import DatabaseMiddleware
from splitter.middlewares.auth import AuthMiddleware
from splitter.middlewares.errors import ErrorsMiddleware

__all__ = ["DatabaseMiddleware", "AuthMiddleware", "ErrorsMiddleware"]
