"""API module for honeytrap.

API layer:
- Resolves caller and record store per request
- Returns payloads for the dashboard UI
- Forbidden: building store filters directly
"""
