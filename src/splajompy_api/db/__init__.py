# src/splajompy_api/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, get_sessionmaker

__all__ = ["get_sessionmaker", "SessionLocal"]
