"""
Unit tests for the in-memory task store.
"""

import threading

import pytest

from taskserver.store import TaskStore
from taskserver.models import Task


class TestCreateTask:
    """Tests for TaskStore.create_task."""

    def test_create_returns_new_task(self, store: TaskStore):
        """Test that a created task starts incomplete with the given description."""
        task = store.create_task("buy milk")

        assert task == Task(id=1, description="buy milk", completed=False)

    def test_ids_increase_monotonically(self, store: TaskStore):
        """Test that each create gets the next id."""
        ids = [store.create_task(f"task {i}").id for i in range(5)]

        assert ids == [1, 2, 3, 4, 5]

    def test_empty_description_allowed(self, store: TaskStore):
        """Test that an empty description is stored as-is."""
        task = store.create_task("")

        assert task.description == ""

    def test_returned_task_is_a_copy(self, store: TaskStore):
        """Test that mutating a returned task does not touch the store."""
        task = store.create_task("original")
        task.description = "changed"
        task.completed = True

        [stored] = store.list_tasks()
        assert stored.description == "original"
        assert stored.completed is False


class TestListTasks:
    """Tests for TaskStore.list_tasks."""

    def test_empty_store(self, store: TaskStore):
        """Test listing a fresh store."""
        assert store.list_tasks() == []
        assert len(store) == 0

    def test_round_trip(self, store: TaskStore):
        """Test that a created task shows up in the listing exactly."""
        task = store.create_task("buy milk")

        assert store.list_tasks() == [task]

    def test_snapshot_is_detached(self, store: TaskStore):
        """Test that a listing does not change when the store does."""
        store.create_task("a")
        snapshot = store.list_tasks()

        store.create_task("b")
        store.update_task(1, completed=True)

        assert snapshot == [Task(id=1, description="a", completed=False)]


class TestUpdateTask:
    """Tests for TaskStore.update_task."""

    def test_update_completed_only(self, store: TaskStore):
        """Test that updating completed leaves description unchanged."""
        store.create_task("test")

        task = store.update_task(1, completed=True)

        assert task == Task(id=1, description="test", completed=True)

    def test_update_description_only(self, store: TaskStore):
        """Test that updating description leaves completed unchanged."""
        store.create_task("test")
        store.update_task(1, completed=True)

        task = store.update_task(1, description="renamed")

        assert task == Task(id=1, description="renamed", completed=True)

    def test_update_nothing_returns_record(self, store: TaskStore):
        """Test that an empty update returns the unchanged record."""
        original = store.create_task("test")

        assert store.update_task(1) == original
        assert store.list_tasks() == [original]

    def test_explicit_false_and_empty_overwrite(self, store: TaskStore):
        """Test that False and "" are applied, not treated as absent."""
        store.create_task("test")
        store.update_task(1, completed=True)

        task = store.update_task(1, description="", completed=False)

        assert task == Task(id=1, description="", completed=False)

    def test_update_unknown_id(self, store: TaskStore):
        """Test that updating a missing task signals not found."""
        assert store.update_task(42, completed=True) is None
        assert store.list_tasks() == []


class TestDeleteTask:
    """Tests for TaskStore.delete_task."""

    def test_delete_returns_removed_task(self, store: TaskStore):
        """Test that delete returns the task as it was."""
        created = store.create_task("test")

        assert store.delete_task(1) == created
        assert store.list_tasks() == []

    def test_delete_unknown_id(self, store: TaskStore):
        """Test that deleting a missing task signals not found."""
        assert store.delete_task(99) is None

    def test_delete_twice(self, store: TaskStore):
        """Test that a task can only be deleted once."""
        store.create_task("test")

        assert store.delete_task(1) is not None
        assert store.delete_task(1) is None

    def test_deleted_id_never_reused(self, store: TaskStore):
        """Test that ids keep increasing after deletes."""
        store.create_task("a")
        store.create_task("b")
        store.delete_task(2)
        store.delete_task(1)

        task = store.create_task("c")

        assert task.id == 3
        assert [t.id for t in store.list_tasks()] == [3]


class TestConcurrency:
    """Tests for concurrent access to the store."""

    def test_concurrent_creates_get_distinct_ids(self, store: TaskStore):
        """Test that N threads creating at once produce N distinct ids."""
        n = 50
        barrier = threading.Barrier(n)
        results = []
        results_lock = threading.Lock()

        def worker(i: int):
            barrier.wait()
            task = store.create_task(f"task {i}")
            with results_lock:
                results.append(task.id)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert sorted(results) == list(range(1, n + 1))
        assert len(store) == n

    def test_concurrent_create_and_delete(self, store: TaskStore):
        """Test that deletes racing creates never cause id reuse."""
        for i in range(20):
            store.create_task(f"seed {i}")

        created_ids = []
        created_lock = threading.Lock()

        def creator():
            for i in range(20):
                task = store.create_task("new")
                with created_lock:
                    created_ids.append(task.id)

        def deleter():
            for task_id in range(1, 21):
                store.delete_task(task_id)

        threads = [threading.Thread(target=creator) for _ in range(3)]
        threads.append(threading.Thread(target=deleter))
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert sorted(created_ids) == list(range(21, 81))
        assert sorted(t.id for t in store.list_tasks()) == list(range(21, 81))

    @pytest.mark.parametrize("updates", [100])
    def test_concurrent_updates_keep_record_consistent(self, store: TaskStore, updates: int):
        """Test that racing updates leave one of the written values, never a mix."""
        store.create_task("start")

        def writer(label: str, flag: bool):
            for _ in range(updates):
                store.update_task(1, description=label, completed=flag)

        threads = [
            threading.Thread(target=writer, args=("a", True)),
            threading.Thread(target=writer, args=("b", False)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        [task] = store.list_tasks()
        assert (task.description, task.completed) in {("a", True), ("b", False)}
