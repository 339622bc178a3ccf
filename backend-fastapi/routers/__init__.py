# routers/__init__.py
# Router module initialization

from .p12convert import router as p12convert_router
from .exports import router as exports_router
from .health import router as health_router

__all__ = [
    'p12convert_router',
    'exports_router',
    'health_router'
]
