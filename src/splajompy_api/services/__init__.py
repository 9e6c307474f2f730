# src/splajompy_api/services/__init__.py
"""Business logic services for the Splajompy application."""
