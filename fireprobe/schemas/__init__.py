"""Request/response schemas for the HTTP API."""
