"""Tests for cross-store workspace operations."""

from uuid import uuid4

import pytest

from notesync.core.schemas.folder import FolderCreate
from notesync.core.schemas.note import NoteCreate
from notesync.core.schemas.tag import TagCreate
from notesync.core.services.workspace import DeletionMode
from notesync.errors import EntityNotFoundError


@pytest.fixture
async def populated(workspace, user):
    """Two folders, two tags and three notes."""
    work = await workspace.folders.create(FolderCreate(name="Work"))
    home = await workspace.folders.create(FolderCreate(name="Home"))
    urgent = await workspace.tags.create(TagCreate(name="urgent"))
    later = await workspace.tags.create(TagCreate(name="later"))
    standup = await workspace.notes.create(
        NoteCreate(title="Standup", content="<p>daily sync</p>", folder_id=work.id, tag_ids=[urgent.id])
    )
    budget = await workspace.notes.create(
        NoteCreate(title="Budget", content="<p>quarterly numbers</p>", folder_id=work.id, tag_ids=[later.id])
    )
    groceries = await workspace.notes.create(
        NoteCreate(title="Groceries", content="<p>milk, eggs</p>", folder_id=home.id, tag_ids=[urgent.id, later.id])
    )
    return {
        "work": work,
        "home": home,
        "urgent": urgent,
        "later": later,
        "standup": standup,
        "budget": budget,
        "groceries": groceries,
    }


class TestFolderDeletion:
    """Test deleting folders that still contain notes."""

    async def test_remove_references(self, workspace, populated):
        """Member notes survive without a folder."""
        workspace.ui.set_selected_folder(populated["work"].id)

        await workspace.delete_folder(populated["work"].id, DeletionMode.REMOVE_REFERENCES)

        assert workspace.folders.get(populated["work"].id) is None
        assert workspace.notes.get(populated["standup"].id).folder_id is None
        assert workspace.notes.get(populated["budget"].id).folder_id is None
        assert workspace.notes.get(populated["groceries"].id).folder_id == populated["home"].id
        assert workspace.ui.selected_folder is None

    async def test_delete_notes(self, workspace, db, populated):
        """Member notes are deleted along with the folder."""
        await workspace.delete_folder(populated["work"].id, DeletionMode.DELETE_NOTES)

        assert [n.id for n in workspace.notes.notes] == [populated["groceries"].id]
        assert len(db.rows("notes")) == 1

    async def test_unknown_folder(self, workspace, populated):
        """Deleting a folder the store does not hold asks for a reload."""
        with pytest.raises(EntityNotFoundError) as excinfo:
            await workspace.delete_folder(uuid4(), DeletionMode.DELETE_NOTES)
        assert excinfo.value.reload_required is True


class TestTagDeletion:
    """Test deleting tags that are still attached to notes."""

    async def test_remove_references(self, workspace, populated):
        """Only the deleted tag is detached from its notes."""
        workspace.ui.toggle_tag(populated["urgent"].id)

        await workspace.delete_tag(populated["urgent"].id, DeletionMode.REMOVE_REFERENCES)

        assert workspace.notes.get(populated["standup"].id).tag_ids == []
        assert workspace.notes.get(populated["groceries"].id).tag_ids == [populated["later"].id]
        assert workspace.tags.get(populated["urgent"].id) is None
        assert workspace.ui.selected_tags == []

    async def test_delete_notes(self, workspace, populated):
        """Every note carrying the tag is deleted."""
        await workspace.delete_tag(populated["later"].id, DeletionMode.DELETE_NOTES)

        assert [n.id for n in workspace.notes.notes] == [populated["standup"].id]


class TestVisibleNotes:
    """Test filtering, search and ordering of the note list."""

    async def test_pinned_first_then_recent(self, workspace, populated):
        """Pinned notes lead; the rest follow by last update."""
        await workspace.notes.toggle_pin(populated["standup"].id)

        titles = [n.title for n in workspace.visible_notes()]

        assert titles == ["Standup", "Groceries", "Budget"]

    async def test_folder_filter(self, workspace, populated):
        """Selecting a folder shows only its notes."""
        workspace.ui.set_selected_folder(populated["home"].id)

        assert [n.title for n in workspace.visible_notes()] == ["Groceries"]

    async def test_tags_match_any(self, workspace, populated):
        """A note matches when it carries any selected tag."""
        workspace.ui.set_selected_tags([populated["urgent"].id])

        assert {n.title for n in workspace.visible_notes()} == {"Standup", "Groceries"}

    async def test_search_ignores_markup(self, workspace, populated):
        """Search matches title or text content, case-insensitively."""
        workspace.ui.set_search_query("QUARTERLY")
        assert [n.title for n in workspace.visible_notes()] == ["Budget"]

        workspace.ui.set_search_query("p")
        assert {n.title for n in workspace.visible_notes()} == {"Standup"}

    async def test_search_tolerates_typos(self, workspace, populated):
        """Misspelled terms still find the note; unrelated words do not."""
        workspace.ui.set_search_query("groseries")
        assert [n.title for n in workspace.visible_notes()] == ["Groceries"]

        workspace.ui.set_search_query("quartely numbrs")
        assert [n.title for n in workspace.visible_notes()] == ["Budget"]

        workspace.ui.set_search_query("banana")
        assert workspace.visible_notes() == []

    async def test_reset(self, workspace, populated):
        """Reset drops every collection and filter."""
        workspace.ui.set_search_query("x")

        workspace.reset()

        assert workspace.notes.notes == []
        assert workspace.folders.folders == []
        assert workspace.ui.search_query == ""
