"""
Core utilities shared across the shipment API.

This package hosts the cross-cutting pieces every other layer depends on:
- configuration helpers (env vars, storage path, CORS origins)
- logging setup
- the error taxonomy shared by the store, services and routers
"""
