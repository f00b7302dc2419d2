"""
API v1 package.

Contains versioned API routes for the SoftwareHub ratings and submissions API.
"""

from softwarehub.api.v1.routes import router

__all__ = ["router"]
