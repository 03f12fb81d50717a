"""
Bookstore catalog core: book models, MongoDB data access and view rendering.
"""
