"""Integration tests for document folder deletion."""

import pytest
import pytest_asyncio

from genius_referrals.models import Document, DocumentFolder, Profile
from genius_referrals.models.enums import UserRole
from genius_referrals.services.authorization import Actor
from genius_referrals.services.documents.folder_service import DocumentFolderService
from genius_referrals.utils.exceptions import AuthorizationError, NotFoundError


CLIENT = Actor(profile_id=20, role=UserRole.CLIENT)


@pytest_asyncio.fixture
async def folder_tree(session, admin_profile):
    """
    Client 20's folders:

        1 Taxes 2025
        +-- 2 W-2s
        |   +-- 4 Employer A
        +-- 3 Receipts
        5 Personal
    """
    session.add(
        Profile(id=20, username="client20", email="c@example.com", role=UserRole.CLIENT.value)
    )
    await session.flush()
    for folder_id, parent_id, name in [
        (1, None, "Taxes 2025"),
        (2, 1, "W-2s"),
        (3, 1, "Receipts"),
        (4, 2, "Employer A"),
        (5, None, "Personal"),
    ]:
        session.add(DocumentFolder(id=folder_id, owner_id=20, parent_id=parent_id, name=name))
    await session.flush()
    for doc_id, folder_id in [(1, 2), (2, 4), (3, 3), (4, 5), (5, None)]:
        session.add(
            Document(
                id=doc_id,
                owner_id=20,
                folder_id=folder_id,
                file_name=f"doc{doc_id}.pdf",
                storage_key=f"client20/doc{doc_id}.pdf",
            )
        )
    await session.commit()


class TestDeleteFolder:
    """Soft-delete cascade."""

    @pytest.mark.asyncio
    async def test_deletes_whole_subtree(self, session, folder_tree, test_settings):
        service = DocumentFolderService(session, test_settings)

        result = await service.delete_folder(CLIENT, 1)

        assert result.folder_ids == [1, 2, 3, 4]
        assert result.folders_marked == 4
        assert result.documents_marked == 3

        personal = await session.get(DocumentFolder, 5)
        loose = await session.get(Document, 5)
        assert personal.is_deleted is False
        assert loose.is_deleted is False

    @pytest.mark.asyncio
    async def test_repeat_delete_changes_nothing(self, session, folder_tree, test_settings):
        """Test deleting twice keeps the first deleted_at."""
        service = DocumentFolderService(session, test_settings)
        await service.delete_folder(CLIENT, 1)
        first_deleted_at = (await session.get(DocumentFolder, 2)).deleted_at

        again = await service.delete_folder(CLIENT, 1)

        assert again.folders_marked == 0
        assert again.documents_marked == 0
        assert (await session.get(DocumentFolder, 2)).deleted_at == first_deleted_at

    @pytest.mark.asyncio
    async def test_other_client_denied(self, session, folder_tree, test_settings):
        service = DocumentFolderService(session, test_settings)

        with pytest.raises(AuthorizationError):
            await service.delete_folder(Actor(profile_id=21, role=UserRole.CLIENT), 1)

    @pytest.mark.asyncio
    async def test_admin_may_delete(self, session, folder_tree, test_settings):
        service = DocumentFolderService(session, test_settings)

        result = await service.delete_folder(Actor(profile_id=1, role=UserRole.ADMIN), 5)

        assert result.folder_ids == [5]
        assert result.documents_marked == 1

    @pytest.mark.asyncio
    async def test_unknown_folder(self, session, folder_tree, test_settings):
        with pytest.raises(NotFoundError):
            await DocumentFolderService(session, test_settings).delete_folder(CLIENT, 99)


class TestDeleteDocument:
    @pytest.mark.asyncio
    async def test_delete_document_once(self, session, folder_tree, test_settings):
        service = DocumentFolderService(session, test_settings)

        assert await service.delete_document(CLIENT, 5) is True
        assert await service.delete_document(CLIENT, 5) is False
