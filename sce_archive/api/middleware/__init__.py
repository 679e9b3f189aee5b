"""
API middleware.
"""

from sce_archive.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
