# Middleware package init
"""
PerkHub — Middleware Package
==============================

Middleware Chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: abusive clients are rejected before any work
    2. Request ID: correlation ID for logs and the X-Request-ID header
    3. Logging: one access line per request with status and duration

Responses travel the chain in reverse, so the request ID header and the
access log line both see the final status code.
"""
