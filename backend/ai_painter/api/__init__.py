"""
API Routes Module

Exposes all route modules for registration in main app.
"""
from . import routes_paint

__all__ = ["routes_paint"]
