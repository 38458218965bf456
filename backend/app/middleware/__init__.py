# Middleware package init
"""
Books API - Middleware Package
================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    - Request ID: correlation id in a ContextVar and the X-Request-ID header
    - Logging: access log line with status and duration, tagged with the id
    - CORS: FastAPI's CORSMiddleware (preflight and CORS headers)
"""
