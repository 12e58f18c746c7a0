"""
API routers package
"""

from app.routers.availabilities import router as availabilities_router
from app.routers.matching import router as matching_router
