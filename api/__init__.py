"""
FastAPI backend for the bookstore catalog.

This package provides:
- RESTful CRUD endpoints for book records under /api
- HTML views rendered directly from MongoDB
- Collection, index and seed-data provisioning at startup
"""

__version__ = "1.0.0"
