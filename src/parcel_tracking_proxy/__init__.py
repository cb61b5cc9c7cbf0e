# src/parcel_tracking_proxy/__init__.py
from .resolution.service import TrackingService, build_request
from .server.app import create_app

__all__ = [
    "TrackingService",
    "build_request",
    "create_app",
]
