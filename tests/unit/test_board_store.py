"""BoardStore unit tests: placement, ordering, versions and concurrent access."""

import asyncio

import pytest

from app.application.services.board_store import BoardStore
from app.domain.entities.task import Attachment, TaskEntity
from app.domain.enums import Priority
from app.domain.exceptions import (
    InvalidColumnException,
    TaskAlreadyExistsException,
    TaskNotFoundException,
    ValidationException,
)


def _task(title: str = "Write docs", task_id: str = "") -> TaskEntity:
    return TaskEntity(id=task_id, title=title)


def _ids(snapshot, column: str) -> list[str]:
    return [t.id for t in snapshot.columns[column]]


def test_rejects_unusable_layout() -> None:
    """Construction fails for empty, duplicate or inconsistent columns."""
    with pytest.raises(ValueError):
        BoardStore([], "To Do")
    with pytest.raises(ValueError):
        BoardStore(["A", "A"], "A")
    with pytest.raises(ValueError):
        BoardStore(["A", "B"], "C")


async def test_empty_board_snapshot(store: BoardStore) -> None:
    """A fresh board has every column, no tasks, version 0."""
    snapshot = await store.snapshot()
    assert list(snapshot.columns) == ["To Do", "In Progress", "Done"]
    assert snapshot.task_count() == 0
    assert snapshot.version == 0


async def test_create_assigns_id_status_and_timestamp(store: BoardStore) -> None:
    """Create appends to the column, assigns an id and stamps created_at."""
    created = await store.apply_create("To Do", _task())
    assert created.id
    assert created.status == "To Do"
    assert created.created_at is not None
    assert created.updated_at is None
    snapshot = await store.snapshot()
    assert _ids(snapshot, "To Do") == [created.id]
    assert snapshot.version == 1


async def test_create_keeps_client_id_and_rejects_duplicates(store: BoardStore) -> None:
    """A client-supplied id is kept; the same id cannot be created twice."""
    await store.apply_create("To Do", _task(task_id="t1"))
    with pytest.raises(TaskAlreadyExistsException) as exc_info:
        await store.apply_create("Done", _task(task_id="t1"))
    assert exc_info.value.details == {"task_id": "t1", "column": "To Do"}
    assert store.version == 1


async def test_create_in_unknown_column(store: BoardStore) -> None:
    """Unknown column is rejected and nothing changes."""
    with pytest.raises(InvalidColumnException):
        await store.apply_create("Backlog", _task())
    assert (await store.snapshot()).task_count() == 0
    assert store.version == 0


async def test_create_appends_in_order(store: BoardStore) -> None:
    """Tasks keep insertion order within a column."""
    for task_id in ("a", "b", "c"):
        await store.apply_create("To Do", _task(task_id=task_id))
    assert _ids(await store.snapshot(), "To Do") == ["a", "b", "c"]


async def test_update_merges_patch_in_place(store: BoardStore) -> None:
    """Update changes only patched fields and keeps position."""
    await store.apply_create("To Do", _task(task_id="a"))
    await store.apply_create("To Do", _task(task_id="b", title="Keep"))
    updated, column = await store.apply_update("a", {"title": "Renamed", "priority": "High"})
    assert column == "To Do"
    assert updated.title == "Renamed"
    assert updated.priority is Priority.HIGH
    assert updated.updated_at is not None
    snapshot = await store.snapshot()
    assert _ids(snapshot, "To Do") == ["a", "b"]
    assert snapshot.columns["To Do"][1].title == "Keep"


async def test_update_rejects_store_owned_fields(store: BoardStore) -> None:
    """status, id and attachments cannot be patched."""
    await store.apply_create("To Do", _task(task_id="a"))
    for field in ("status", "id", "attachments"):
        with pytest.raises(ValidationException):
            await store.apply_update("a", {field: "x"})
    assert store.version == 1


async def test_update_rejects_invalid_values(store: BoardStore) -> None:
    """An empty title or unknown priority leaves the task untouched."""
    await store.apply_create("To Do", _task(task_id="a"))
    with pytest.raises(ValidationException):
        await store.apply_update("a", {"title": ""})
    with pytest.raises(ValidationException):
        await store.apply_update("a", {"priority": "Urgent"})
    found = await store.find("a")
    assert found is not None
    assert found[0].title == "Write docs"
    assert store.version == 1


async def test_update_missing_task(store: BoardStore) -> None:
    with pytest.raises(TaskNotFoundException):
        await store.apply_update("nope", {"title": "x"})


async def test_move_to_tail_of_target(store: BoardStore) -> None:
    """Move removes from the source and appends to the target's tail."""
    await store.apply_create("To Do", _task(task_id="a"))
    await store.apply_create("To Do", _task(task_id="b"))
    await store.apply_create("Done", _task(task_id="c"))
    moved = await store.apply_move("a", "To Do", "Done")
    assert moved.status == "Done"
    snapshot = await store.snapshot()
    assert _ids(snapshot, "To Do") == ["b"]
    assert _ids(snapshot, "Done") == ["c", "a"]


async def test_move_from_wrong_column_fails(store: BoardStore) -> None:
    """A task not in the stated source column is not found; no change."""
    await store.apply_create("To Do", _task(task_id="a"))
    with pytest.raises(TaskNotFoundException):
        await store.apply_move("a", "In Progress", "Done")
    with pytest.raises(TaskNotFoundException):
        await store.apply_move("ghost", "To Do", "Done")
    assert _ids(await store.snapshot(), "To Do") == ["a"]
    assert store.version == 1


async def test_move_to_unknown_column_fails(store: BoardStore) -> None:
    await store.apply_create("To Do", _task(task_id="a"))
    with pytest.raises(InvalidColumnException):
        await store.apply_move("a", "To Do", "Archive")
    assert _ids(await store.snapshot(), "To Do") == ["a"]


async def test_move_within_same_column_is_noop_commit(store: BoardStore) -> None:
    """from == to keeps position but still counts as a committed mutation."""
    await store.apply_create("To Do", _task(task_id="a"))
    await store.apply_create("To Do", _task(task_id="b"))
    await store.apply_move("a", "To Do", "To Do")
    snapshot = await store.snapshot()
    assert _ids(snapshot, "To Do") == ["a", "b"]
    assert snapshot.version == 3


async def test_delete_twice(store: BoardStore) -> None:
    """The second delete of the same task fails and changes nothing."""
    await store.apply_create("To Do", _task(task_id="a"))
    removed = await store.apply_delete("a", "To Do")
    assert removed.id == "a"
    with pytest.raises(TaskNotFoundException):
        await store.apply_delete("a", "To Do")
    snapshot = await store.snapshot()
    assert snapshot.task_count() == 0
    assert snapshot.version == 2


async def test_append_attachment(store: BoardStore) -> None:
    """Attachments are appended and reported on the task."""
    await store.apply_create("To Do", _task(task_id="a"))
    attachment = Attachment(
        id="f1", name="design.pdf", media_type="application/pdf", size=3,
        url="/api/v1/attachments/a/f1-design.pdf", storage_ref="a/f1-design.pdf",
    )
    task = await store.append_attachment("a", "To Do", attachment)
    assert task.attachments == [attachment]
    with pytest.raises(TaskNotFoundException):
        await store.append_attachment("a", "Done", attachment)


async def test_on_commit_sees_version_and_copy(store: BoardStore) -> None:
    """The commit hook runs once per mutation with consecutive versions."""
    seen: list[tuple[int, str]] = []

    def hook(version: int, task: TaskEntity) -> None:
        seen.append((version, task.status))

    await store.apply_create("To Do", _task(task_id="a"), hook)
    await store.apply_move("a", "To Do", "Done", hook)
    with pytest.raises(TaskNotFoundException):
        await store.apply_delete("a", "To Do", hook)
    await store.apply_delete("a", "Done", hook)
    assert seen == [(1, "To Do"), (2, "Done"), (3, "Done")]


async def test_snapshot_is_detached(store: BoardStore) -> None:
    """Mutating a snapshot does not change the board."""
    await store.apply_create("To Do", _task(task_id="a"))
    snapshot = await store.snapshot()
    snapshot.columns["To Do"][0].title = "changed"
    snapshot.columns["To Do"].clear()
    found = await store.find("a")
    assert found is not None
    assert found[0].title == "Write docs"


async def test_concurrent_creates_all_land(store: BoardStore) -> None:
    """N concurrent creates give N tasks and N distinct versions."""
    versions: list[int] = []
    await asyncio.gather(
        *(
            store.apply_create(
                "To Do", _task(task_id=f"t{i}"), lambda v, t: versions.append(v)
            )
            for i in range(50)
        )
    )
    snapshot = await store.snapshot()
    assert snapshot.task_count() == 50
    assert len({t.id for t in snapshot.tasks()}) == 50
    assert sorted(versions) == list(range(1, 51))
    assert snapshot.version == 50


async def test_concurrent_moves_of_one_task(store: BoardStore) -> None:
    """Racing moves of one task: exactly one wins, the task exists once."""
    await store.apply_create("To Do", _task(task_id="a"))
    results = await asyncio.gather(
        store.apply_move("a", "To Do", "In Progress"),
        store.apply_move("a", "To Do", "Done"),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, TaskNotFoundException)]
    assert len(failures) == 1
    snapshot = await store.snapshot()
    assert snapshot.task_count() == 1
    assert snapshot.counts()["To Do"] == 0


async def test_stats(store: BoardStore) -> None:
    """Stats count per column, priority and category."""
    await store.apply_create("To Do", _task(task_id="a"))
    await store.apply_create("Done", TaskEntity(id="b", title="x", priority=Priority.HIGH))
    stats = (await store.snapshot()).stats()
    assert stats["total"] == 2
    assert stats["by_column"] == {"To Do": 1, "In Progress": 0, "Done": 1}
    assert stats["by_priority"]["High"] == 1
    assert stats["version"] == 2


async def test_concurrent_creates_without_ids_get_distinct_ids(store: BoardStore) -> None:
    """Server-assigned ids stay unique under concurrent creates."""
    created = await asyncio.gather(
        *(store.apply_create("To Do", _task(title=f"task {i}")) for i in range(50))
    )
    ids = [t.id for t in created]
    assert all(ids)
    assert len(set(ids)) == 50
    snapshot = await store.snapshot()
    assert {t.id for t in snapshot.tasks()} == set(ids)
