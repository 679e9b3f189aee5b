"""
Content services - archive records and posts behind the access policy.
"""

from sce_archive.content.base import ContentService
from sce_archive.content.records import RecordService
from sce_archive.content.posts import PostService
from sce_archive.content.maintenance import reset_content

__all__ = [
    "ContentService",
    "RecordService",
    "PostService",
    "reset_content",
]
