"""Tests for the hierarchical containment manager.

Every test ends by asserting that the bidirectional links are still
consistent, using the integrity checker.
"""

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from learnpath.db import Base, SessionLocal, transaction
from learnpath.db.models import Folder, Pathway, Project, Workspace
from learnpath.errors import Forbidden, NotFound, StaleWrite, ValidationError
from learnpath.models.enums import ContentType
from learnpath.repositories import content_repositories, user_repository
from learnpath.services import containment_manager, pathway_item_service
from learnpath.services.identity import Identity
from learnpath.services.locks import ResourceLocks, resource_locks
from learnpath.utils import generate_id


@pytest.fixture
def owner(make_identity):
    return make_identity("Owner")


@pytest.fixture
def project(db_session: Session, owner):
    ws = containment_manager.create_workspace(db_session, owner, "Team")
    return containment_manager.create_project(db_session, owner, "Course", workspace_id=ws.id)


def count(db: Session, model, **filters) -> int:
    return db.query(model).filter_by(**filters).count()


class TestCreate:
    """Creation links parent and child in both directions."""

    def test_workspace_is_linked_to_owner(self, db_session: Session, owner):
        ws = containment_manager.create_workspace(db_session, owner, "Mine", description="d")

        user = user_repository.get_by_id(db_session, owner.id)
        assert ws.id in user.workspaces
        assert ws.owner_id == owner.id
        assert ws.version == 1

    def test_project_is_appended_to_workspace(self, db_session: Session, owner):
        ws = containment_manager.create_workspace(db_session, owner, "Mine")
        first = containment_manager.create_project(db_session, owner, "One", workspace_id=ws.id)
        second = containment_manager.create_project(db_session, owner, "Two", workspace_id=ws.id)

        assert ws.projects == [first.id, second.id]
        assert first.workspace_id == ws.id

    def test_project_in_unknown_workspace(self, db_session: Session, owner):
        with pytest.raises(NotFound):
            containment_manager.create_project(db_session, owner, "Lost", workspace_id="ws_missing")
        assert count(db_session, Project) == 0

    def test_project_in_foreign_workspace(self, db_session: Session, owner, make_identity):
        ws = containment_manager.create_workspace(db_session, owner, "Mine")
        with pytest.raises(Forbidden):
            containment_manager.create_project(db_session, make_identity("Other"), "Intruder", workspace_id=ws.id)

    def test_folder_parent_folder_wins(self, db_session: Session, owner, project):
        other = containment_manager.create_project(db_session, owner, "Other")
        parent = containment_manager.create_folder(db_session, owner, "Parent", project_id=project.id)

        child = containment_manager.create_folder(
            db_session, owner, "Child", parent_folder_id=parent.id, project_id=other.id
        )

        assert child.parent_folder_id == parent.id
        assert child.project_id == project.id
        assert parent.sub_folders == [child.id]
        assert child.id not in other.folders
        assert project.folders == [parent.id]

    def test_folder_needs_a_target(self, db_session: Session, owner):
        with pytest.raises(ValidationError):
            containment_manager.create_folder(db_session, owner, "Nowhere")

    def test_folder_in_unknown_project(self, db_session: Session, owner):
        with pytest.raises(NotFound):
            containment_manager.create_folder(db_session, owner, "Lost", project_id="proj_missing")

    def test_folder_requires_project_owner(self, db_session: Session, project, make_identity):
        with pytest.raises(Forbidden):
            containment_manager.create_folder(db_session, make_identity("Other"), "Nope", project_id=project.id)

    def test_pathway_in_folder_records_project(self, db_session: Session, owner, project):
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        pathway = containment_manager.create_pathway(db_session, owner, "P", folder_id=folder.id)

        assert pathway.folder_id == folder.id
        assert pathway.project_id == project.id
        assert folder.pathways == [pathway.id]
        assert pathway.id not in project.pathways

    def test_invalid_visibility_for_kind(self, db_session: Session, owner, project):
        with pytest.raises(ValidationError):
            containment_manager.create_folder(db_session, owner, "F", project_id=project.id, visibility="workspace")
        assert containment_manager.check_integrity(db_session) == []


class TestDelete:
    """Deletes cascade to every descendant and unlink from the parent."""

    def test_project_cascade(self, db_session: Session, owner, project):
        folder_a = containment_manager.create_folder(db_session, owner, "A", project_id=project.id)
        folder_b = containment_manager.create_folder(db_session, owner, "B", parent_folder_id=folder_a.id)
        containment_manager.create_pathway(db_session, owner, "In B", folder_id=folder_b.id)
        containment_manager.create_pathway(db_session, owner, "At root", project_id=project.id)
        ws_id = project.workspace_id

        containment_manager.delete_project(db_session, owner, project.id)

        assert count(db_session, Project) == 0
        assert count(db_session, Folder) == 0
        assert count(db_session, Pathway) == 0
        assert project.id not in db_session.get(Workspace, ws_id).projects
        assert containment_manager.check_integrity(db_session) == []

    def test_folder_cascade(self, db_session: Session, owner, project):
        folder = containment_manager.create_folder(db_session, owner, "Top", project_id=project.id)
        sub = containment_manager.create_folder(db_session, owner, "Sub", parent_folder_id=folder.id)
        deeper = containment_manager.create_folder(db_session, owner, "Deeper", parent_folder_id=sub.id)
        containment_manager.create_pathway(db_session, owner, "Deep", folder_id=deeper.id)
        keep = containment_manager.create_pathway(db_session, owner, "Keep", project_id=project.id)

        containment_manager.delete_folder(db_session, owner, folder.id)

        assert count(db_session, Folder) == 0
        assert [p.id for p in db_session.query(Pathway).all()] == [keep.id]
        assert db_session.get(Project, project.id).folders == []
        assert containment_manager.check_integrity(db_session) == []

    def test_nested_folder_delete_unlinks_from_parent(self, db_session: Session, owner, project):
        parent = containment_manager.create_folder(db_session, owner, "Parent", project_id=project.id)
        child = containment_manager.create_folder(db_session, owner, "Child", parent_folder_id=parent.id)
        sibling = containment_manager.create_folder(db_session, owner, "Sibling", parent_folder_id=parent.id)
        inner = containment_manager.create_folder(db_session, owner, "Inner", parent_folder_id=child.id)
        pathway = containment_manager.create_pathway(db_session, owner, "P", folder_id=child.id)

        containment_manager.delete_folder(db_session, owner, child.id)

        assert db_session.get(Folder, parent.id).sub_folders == [sibling.id]
        assert count(db_session, Folder, id=inner.id) == 0
        assert count(db_session, Pathway, id=pathway.id) == 0
        assert db_session.get(Project, project.id).folders == [parent.id]
        assert containment_manager.check_integrity(db_session) == []

    def test_delete_pathway_unlinks_from_folder(self, db_session: Session, owner, project):
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        pathway = containment_manager.create_pathway(db_session, owner, "P", folder_id=folder.id)

        containment_manager.delete_pathway(db_session, owner, pathway.id)

        assert db_session.get(Folder, folder.id).pathways == []
        assert containment_manager.check_integrity(db_session) == []

    def test_delete_requires_owner(self, db_session: Session, project, make_identity):
        with pytest.raises(Forbidden):
            containment_manager.delete_project(db_session, make_identity("Other"), project.id)
        assert count(db_session, Project) == 1

    def test_delete_workspace_cascades(self, db_session: Session, owner, project):
        containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        ws_id = project.workspace_id

        containment_manager.delete_workspace(db_session, owner, ws_id)

        assert count(db_session, Workspace) == 0
        assert count(db_session, Project) == 0
        assert count(db_session, Folder) == 0
        assert ws_id not in user_repository.get_by_id(db_session, owner.id).workspaces
        assert containment_manager.check_integrity(db_session) == []

    def test_scoped_folder_delete_checks_project(self, db_session: Session, owner, project):
        other = containment_manager.create_project(db_session, owner, "Other")
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=other.id)

        with pytest.raises(NotFound):
            containment_manager.delete_folder_from_project(db_session, owner, project.id, folder.id)

        containment_manager.delete_folder_from_project(db_session, owner, other.id, folder.id)
        assert count(db_session, Folder) == 0

    def test_scoped_pathway_delete_covers_folder_pathways(self, db_session: Session, owner, project):
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        pathway = containment_manager.create_pathway(db_session, owner, "P", folder_id=folder.id)

        containment_manager.delete_pathway_from_project(db_session, owner, project.id, pathway.id)

        assert count(db_session, Pathway) == 0
        assert containment_manager.check_integrity(db_session) == []

    def test_failed_cascade_leaves_everything(self, db_session: Session, owner, project, monkeypatch):
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        containment_manager.create_pathway(db_session, owner, "P", folder_id=folder.id)

        def boom(db, ids):
            raise RuntimeError("disk full")

        monkeypatch.setattr("learnpath.repositories.folder_repository.delete_ids", boom)
        with pytest.raises(RuntimeError):
            containment_manager.delete_project(db_session, owner, project.id)

        assert count(db_session, Project) == 1
        assert count(db_session, Folder) == 1
        assert count(db_session, Pathway) == 1


class TestMove:
    def test_move_folder_under_sibling(self, db_session: Session, owner, project):
        a = containment_manager.create_folder(db_session, owner, "A", project_id=project.id)
        b = containment_manager.create_folder(db_session, owner, "B", project_id=project.id)

        containment_manager.move_folder(db_session, owner, b.id, parent_folder_id=a.id)

        assert db_session.get(Folder, a.id).sub_folders == [b.id]
        assert db_session.get(Project, project.id).folders == [a.id]
        assert containment_manager.check_integrity(db_session) == []

    def test_move_folder_into_descendant(self, db_session: Session, owner, project):
        a = containment_manager.create_folder(db_session, owner, "A", project_id=project.id)
        b = containment_manager.create_folder(db_session, owner, "B", parent_folder_id=a.id)

        with pytest.raises(ValidationError):
            containment_manager.move_folder(db_session, owner, a.id, parent_folder_id=b.id)
        with pytest.raises(ValidationError):
            containment_manager.move_folder(db_session, owner, a.id, parent_folder_id=a.id)

    def test_move_pathway_to_project_root(self, db_session: Session, owner, project):
        folder = containment_manager.create_folder(db_session, owner, "F", project_id=project.id)
        pathway = containment_manager.create_pathway(db_session, owner, "P", folder_id=folder.id)

        containment_manager.move_pathway(db_session, owner, pathway.id)

        assert db_session.get(Pathway, pathway.id).folder_id is None
        assert db_session.get(Project, project.id).pathways == [pathway.id]
        assert containment_manager.check_integrity(db_session) == []


class TestIntegrity:
    def test_reports_dangling_reference(self, db_session: Session, owner, project):
        project.folders = ["fold_ghost"]
        db_session.commit()

        problems = containment_manager.check_integrity(db_session)

        assert any("fold_ghost" in p for p in problems)

    def test_stale_version_is_rejected(self, db_session: Session, owner, project):
        """A row updated elsewhere after it was read cannot be overwritten."""
        other = SessionLocal()
        try:
            stale = other.get(Project, project.id)
            containment_manager.update_project(db_session, owner, project.id, {"name": "Renamed"})

            with pytest.raises(StaleWrite):
                containment_manager.update_project(other, owner, stale.id, {"name": "Lost update"})
        finally:
            other.close()

        assert db_session.get(Project, project.id).name == "Renamed"


class TestLocks:
    def test_keys_are_released(self):
        locks = ResourceLocks()

        with locks.hold("project:b", "project:a", ""):
            assert locks.active_keys() == ["project:a", "project:b"]
            with locks.hold("project:a"):
                pass

        assert locks.active_keys() == []


class TestVersionedDelete:
    def test_delete_racing_an_update_is_rejected(self, db_session: Session, owner, project, monkeypatch):
        """A row rewritten elsewhere while its delete is in flight survives."""
        pathway = containment_manager.create_pathway(db_session, owner, "P", project_id=project.id)
        detach = containment_manager._detach_pathway

        def renamed_elsewhere(db, target):
            other = SessionLocal()
            try:
                with transaction(other):
                    other.get(Pathway, target.id).title = "Renamed elsewhere"
            finally:
                other.close()
            detach(db, target)

        monkeypatch.setattr(containment_manager, "_detach_pathway", renamed_elsewhere)

        with pytest.raises(StaleWrite):
            containment_manager.delete_pathway(db_session, owner, pathway.id)

        db_session.expire_all()
        assert db_session.get(Pathway, pathway.id).title == "Renamed elsewhere"
        assert db_session.get(Project, project.id).pathways == [pathway.id]


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory on a file database, one connection per session."""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrent.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(file_engine)
    yield sessionmaker(bind=file_engine, autoflush=False, expire_on_commit=False)
    file_engine.dispose()


def run_concurrently(session_factory, *calls) -> list[Exception]:
    """Run each call on its own thread and session; return what they raised."""
    start = threading.Barrier(len(calls))
    errors: list[Exception] = []

    def runner(call):
        db = session_factory()
        try:
            start.wait()
            call(db)
        except Exception as e:
            errors.append(e)
        finally:
            db.close()

    threads = [threading.Thread(target=runner, args=(call,)) for call in calls]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=20)
    assert not any(thread.is_alive() for thread in threads), "concurrent mutations did not finish"
    return errors


class TestConcurrency:
    @pytest.fixture
    def owner(self):
        return Identity(id=generate_id("user"))

    def test_opposing_folder_moves_finish(self, file_sessions, owner):
        with file_sessions() as db:
            project = containment_manager.create_project(db, owner, "Course")
            a = containment_manager.create_folder(db, owner, "A", project_id=project.id)
            b = containment_manager.create_folder(db, owner, "B", project_id=project.id)

        errors = run_concurrently(
            file_sessions,
            lambda db: containment_manager.move_folder(db, owner, a.id, parent_folder_id=b.id),
            lambda db: containment_manager.move_folder(db, owner, b.id, parent_folder_id=a.id),
        )

        assert len(errors) == 1
        assert isinstance(errors[0], ValidationError)
        with file_sessions() as db:
            assert len(db.get(Project, project.id).folders) == 1
            assert containment_manager.check_integrity(db) == []

    def test_many_moves_of_one_folder(self, file_sessions, owner):
        with file_sessions() as db:
            project = containment_manager.create_project(db, owner, "Course")
            moving = containment_manager.create_folder(db, owner, "Moving", project_id=project.id)
            targets = [
                containment_manager.create_folder(db, owner, f"T{i}", project_id=project.id) for i in range(3)
            ]

        errors = run_concurrently(
            file_sessions,
            *(
                lambda db, target=target: containment_manager.move_folder(
                    db, owner, moving.id, parent_folder_id=target.id
                )
                for target in targets
            ),
        )

        assert errors == []
        with file_sessions() as db:
            parent_id = db.get(Folder, moving.id).parent_folder_id
            assert [t.id for t in targets if moving.id in db.get(Folder, t.id).sub_folders] == [parent_id]
            assert containment_manager.check_integrity(db) == []

    def test_concurrent_item_inserts_are_serialized(self, file_sessions, owner):
        with file_sessions() as db:
            project = containment_manager.create_project(db, owner, "Course")
            pathway = containment_manager.create_pathway(db, owner, "P", project_id=project.id)
            with transaction(db):
                link_ids = [
                    content_repositories[ContentType.Link].create_content(
                        db, {"title": f"L{i}", "url": f"https://example.com/{i}"}
                    ).id
                    for i in range(6)
                ]

        errors = run_concurrently(
            file_sessions,
            *(
                lambda db, link_id=link_id: pathway_item_service.add_item(db, owner, pathway.id, "Link", link_id)
                for link_id in link_ids
            ),
        )

        assert errors == []
        with file_sessions() as db:
            items = db.get(Pathway, pathway.id).items
            assert sorted(i["content"] for i in items) == sorted(link_ids)
        assert resource_locks.active_keys() == []


class TestLockPlanning:
    def test_plan_that_keeps_changing_gives_up(self, db_session: Session):
        calls = iter(range(100))

        with pytest.raises(StaleWrite):
            with containment_manager._locked(db_session, lambda: [f"folder:fold_{next(calls)}"]):
                pass

        assert resource_locks.active_keys() == []
