"""
Document repository.

Data access layer for DocumentFolder and Document models.
"""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.document import Document, DocumentFolder
from genius_referrals.repositories.base import BaseRepository


class DocumentFolderRepository(BaseRepository[DocumentFolder]):
    """Folder repository with tree helpers."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize folder repository."""
        super().__init__(DocumentFolder, session)

    async def get_parent_map(self, owner_id: int) -> dict[int, int | None]:
        """
        Map folder id -> parent id for every folder of an owner.

        Deleted folders are included so a repeated delete walks the same
        tree.
        """
        stmt = select(DocumentFolder.id, DocumentFolder.parent_id).where(
            DocumentFolder.owner_id == owner_id
        )
        result = await self.session.execute(stmt)
        return {row.id: row.parent_id for row in result.all()}

    async def mark_deleted(self, folder_ids: list[int], deleted_at: datetime) -> int:
        """
        Soft-delete folders that are not deleted yet.

        Returns:
            Number of folders newly marked
        """
        if not folder_ids:
            return 0
        stmt = (
            update(DocumentFolder)
            .where(
                DocumentFolder.id.in_(folder_ids),
                DocumentFolder.is_deleted.is_(False),
            )
            .values(is_deleted=True, deleted_at=deleted_at)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount


class DocumentRepository(BaseRepository[Document]):
    """Document repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize document repository."""
        super().__init__(Document, session)

    async def mark_deleted_in_folders(
        self, folder_ids: list[int], deleted_at: datetime
    ) -> int:
        """
        Soft-delete documents contained in the given folders.

        Returns:
            Number of documents newly marked
        """
        if not folder_ids:
            return 0
        stmt = (
            update(Document)
            .where(
                Document.folder_id.in_(folder_ids),
                Document.is_deleted.is_(False),
            )
            .values(is_deleted=True, deleted_at=deleted_at)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount
