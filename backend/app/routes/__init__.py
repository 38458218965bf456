# Routes package init
"""
Books API - API Routes Package
================================

Route Inventory:
    - books.py:   GET/POST /books, GET/PUT/DELETE /books/{id}
    - health.py:  GET /health

Routes only handle HTTP concerns (path, body, status code) and delegate to
BookService.
"""
