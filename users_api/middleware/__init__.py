# Middleware package init
"""
Users API — Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → Route Handler

    - Request ID first, so every log line of the request carries it
    - Logging sees the final status and total duration
    - Security headers are added to whatever the route returned
"""
