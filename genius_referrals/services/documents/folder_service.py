"""
Document folder service.

Folder deletion is a soft-delete cascade: the folder, every folder below it
and every document they contain are marked deleted in one transaction.
Rows that are already deleted keep their original deleted_at, so repeating
a delete changes nothing.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings
from genius_referrals.repositories.document_repository import (
    DocumentFolderRepository,
    DocumentRepository,
)
from genius_referrals.services.authorization import (
    Actor,
    Capability,
    require_self_or_admin,
)
from genius_referrals.services.base_service import BaseService, transaction
from genius_referrals.services.documents.folder_tree import collect_subtree
from genius_referrals.utils.datetime_utils import utc_now
from genius_referrals.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class FolderDeletionResult:
    """What a folder delete touched."""

    folder_ids: list[int]
    folders_marked: int
    documents_marked: int


class DocumentFolderService(BaseService):
    """Soft deletion of folders and documents."""

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        super().__init__(session, settings)
        self.folder_repo = DocumentFolderRepository(session)
        self.document_repo = DocumentRepository(session)

    @transaction
    async def delete_folder(self, actor: Actor, folder_id: int) -> FolderDeletionResult:
        """
        Soft-delete a folder with its whole subtree.

        Args:
            actor: Caller; owners may delete their own folders
            folder_id: Root folder of the delete

        Returns:
            FolderDeletionResult (zero counts on a repeated delete)

        Raises:
            NotFoundError: Unknown folder
            AuthorizationError: Not the owner and not an admin
        """
        folder = await self.folder_repo.get_by_id(folder_id)
        if not folder:
            raise NotFoundError("Folder not found", folder_id=folder_id)

        require_self_or_admin(
            actor,
            folder.owner_id,
            Capability.DELETE_OWN_DOCUMENTS,
            Capability.DELETE_ANY_DOCUMENTS,
        )

        parent_map = await self.folder_repo.get_parent_map(folder.owner_id)
        folder_ids = collect_subtree(folder_id, parent_map)
        now = utc_now()

        folders_marked = await self.folder_repo.mark_deleted(folder_ids, now)
        documents_marked = await self.document_repo.mark_deleted_in_folders(
            folder_ids, now
        )

        self.logger.info(
            "Folder deleted",
            extra={
                "folder_id": folder_id,
                "owner_id": folder.owner_id,
                "folders_marked": folders_marked,
                "documents_marked": documents_marked,
                "actor_id": actor.profile_id,
            },
        )
        return FolderDeletionResult(
            folder_ids=folder_ids,
            folders_marked=folders_marked,
            documents_marked=documents_marked,
        )

    @transaction
    async def delete_document(self, actor: Actor, document_id: int) -> bool:
        """
        Soft-delete a single document.

        Returns:
            True if the document was marked now, False if it already was

        Raises:
            NotFoundError: Unknown document
            AuthorizationError: Not the owner and not an admin
        """
        document = await self.document_repo.get_by_id(document_id)
        if not document:
            raise NotFoundError("Document not found", document_id=document_id)

        require_self_or_admin(
            actor,
            document.owner_id,
            Capability.DELETE_OWN_DOCUMENTS,
            Capability.DELETE_ANY_DOCUMENTS,
        )

        if document.is_deleted:
            return False

        document.is_deleted = True
        document.deleted_at = utc_now()
        await self.session.flush()
        return True
