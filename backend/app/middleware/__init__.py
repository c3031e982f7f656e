# Middleware package init
"""
Notekeep Backend: Middleware Package
======================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for every log line and error body
    2. Logging: one access line per request, with duration and status
"""
