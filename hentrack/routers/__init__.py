"""
FastAPI routers grouped by record type (hens, notes, photos, breeding, etc.).

Each module exposes an APIRouter that app.py includes. Routers read the flock
store from ``app.state`` and translate service errors into HTTP responses.
"""
