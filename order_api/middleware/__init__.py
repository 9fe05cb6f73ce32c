"""
Order API Middleware Package
============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [Unexpected Error] → Route Handler

The request ID is set first so the access log line can carry it; the
logging middleware measures the full handler duration on the way out.
Unhandled exceptions become a 500 before they reach the logging layer.
"""
