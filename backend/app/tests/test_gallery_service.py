import pytest

from app.schemas.diagram import DiagramSave
from app.services.diagram_service import DiagramService
from app.services.gallery_service import DiagramGallery

FLOWCHART = "graph TD\nA-->B"


@pytest.mark.asyncio
async def test_unauthenticated_save_leaves_lists_unchanged(db_session, alice):
    service = DiagramService(db_session)
    await service.save(DiagramSave(title="shared", content=FLOWCHART, is_public=True), alice)
    gallery = DiagramGallery(service, identity=None)
    await gallery.load()
    before_public = list(gallery.public_diagrams)

    result = await gallery.save(DiagramSave(title="X", content=FLOWCHART, is_public=False))

    assert result is None
    assert gallery.my_diagrams == []
    assert gallery.public_diagrams == before_public
    assert gallery.notifications[-1].variant == "destructive"
    assert gallery.notifications[-1].title == "Failed to save diagram"


@pytest.mark.asyncio
async def test_save_adds_to_lists_by_visibility(db_session, alice):
    gallery = DiagramGallery(DiagramService(db_session), alice)
    await gallery.load()

    private = await gallery.save(DiagramSave(title="private", content=FLOWCHART))
    public = await gallery.save(DiagramSave(title="public", content=FLOWCHART, is_public=True))

    assert [d.id for d in gallery.my_diagrams] == [public.id, private.id]
    assert [d.id for d in gallery.public_diagrams] == [public.id]

    await gallery.save(DiagramSave(id=public.id, title="now private", content=FLOWCHART))
    assert gallery.public_diagrams == []
    assert len(gallery.my_diagrams) == 2


@pytest.mark.asyncio
async def test_delete_removes_from_both_lists(db_session, alice):
    gallery = DiagramGallery(DiagramService(db_session), alice)
    public = await gallery.save(DiagramSave(title="public", content=FLOWCHART, is_public=True))

    assert await gallery.delete(public.id)

    assert gallery.my_diagrams == []
    assert gallery.public_diagrams == []


@pytest.mark.asyncio
async def test_delete_of_foreign_diagram_is_reported(db_session, alice, bob):
    service = DiagramService(db_session)
    theirs = await service.save(DiagramSave(title="alice's", content=FLOWCHART, is_public=True), alice)
    gallery = DiagramGallery(service, bob)
    await gallery.load()

    assert await gallery.delete(theirs.id) is False

    assert [d.id for d in gallery.public_diagrams] == [theirs.id]
    assert gallery.notifications[-1].title == "Diagram not deleted"


@pytest.mark.asyncio
async def test_public_list_excludes_private_for_any_caller(db_session, alice, bob):
    service = DiagramService(db_session)
    await service.save(DiagramSave(title="hidden", content=FLOWCHART, is_public=False), alice)
    await service.save(DiagramSave(title="shown", content=FLOWCHART, is_public=True), alice)

    for identity in (None, alice, bob):
        gallery = DiagramGallery(service, identity)
        await gallery.load()
        assert [d.title for d in gallery.public_diagrams] == ["shown"]
