"""
FastAPI routers grouped by domain (shipments, health).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py).
"""
