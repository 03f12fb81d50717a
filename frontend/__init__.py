"""
FastAPI frontend for the bookstore catalog.

Renders the HTML views from data fetched over the backend's REST API.
"""

__version__ = "1.0.0"
