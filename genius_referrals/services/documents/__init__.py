"""
Document services package.

- folder_tree: Subtree collection over a parent mapping
- folder_service: Idempotent soft-delete cascade
"""

from genius_referrals.services.documents.folder_service import (
    DocumentFolderService,
    FolderDeletionResult,
)
from genius_referrals.services.documents.folder_tree import collect_subtree


__all__ = [
    "DocumentFolderService",
    "FolderDeletionResult",
    "collect_subtree",
]
