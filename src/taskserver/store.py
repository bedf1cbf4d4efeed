"""
=============================================================================
IN-MEMORY TASK STORE
=============================================================================

The single piece of shared mutable state in the server.

=============================================================================
LOCKING DISCIPLINE
=============================================================================

Every connection runs in its own thread, and every one of them may touch
the store at the same time:

    Worker 1 ──create_task()──┐
    Worker 2 ──update_task()──┼──► ┌──────────── TaskStore ─────────────┐
    Worker 3 ──list_tasks()───┘    │  _lock    guards BOTH fields below │
                                   │  _tasks   {id: Task}               │
                                   │  _next_id next id to hand out      │
                                   └────────────────────────────────────┘

One lock covers the map AND the id counter, and each operation holds it
from start to finish. Two concurrent creates can therefore never read the
same _next_id, and a list can never observe a half-applied update.

The lock is only ever held around dictionary work, never around socket
I/O, and there is only one lock, so there is no lock ordering to get
wrong.

=============================================================================
COPIES, NOT REFERENCES
=============================================================================

Callers receive copies of Task records. A handler serializing a task it
got back from update_task() cannot see a later concurrent mutation, and
cannot mutate the stored record behind the lock's back.

=============================================================================
"""

import logging
import threading
from typing import Dict, List, Optional

from .models import Task


logger = logging.getLogger(__name__)


class TaskStore:
    """
    Thread-safe in-memory mapping of task ids to tasks.

    Ids start at 1, increase by one per created task and are never
    reused, even after the task holding them is deleted.

    Usage:
        store = TaskStore()
        task = store.create_task("buy milk")
        store.update_task(task.id, completed=True)
        store.delete_task(task.id)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tasks: Dict[int, Task] = {}
        self._next_id = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create_task(self, description: str) -> Task:
        """
        Create a task with the next unused id.

        Returns:
            A copy of the stored task (completed is always False).
        """
        with self._lock:
            task_id = self._next_id
            self._next_id += 1

            task = Task(id=task_id, description=description, completed=False)
            self._tasks[task_id] = task
            result = task.copy()

        logger.debug(f"Created task {task_id}")
        return result

    def list_tasks(self) -> List[Task]:
        """
        Snapshot of every task.

        Tasks come back in creation order here, but callers must not rely
        on any particular order.
        """
        with self._lock:
            return [task.copy() for task in self._tasks.values()]

    def update_task(
        self,
        task_id: int,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Task]:
        """
        Apply the provided fields to a task.

        Args:
            task_id: Id of the task to change.
            description: New description, or None to keep the current one.
            completed: New completion flag, or None to keep the current one.

        Returns:
            A copy of the updated task, or None if no task has that id.
        """
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                result = None
            else:
                if description is not None:
                    task.description = description
                if completed is not None:
                    task.completed = completed
                result = task.copy()

        if result is None:
            logger.debug(f"Update of unknown task {task_id}")
        else:
            logger.debug(f"Updated task {task_id}: {result}")
        return result

    def delete_task(self, task_id: int) -> Optional[Task]:
        """
        Remove a task.

        Returns:
            The removed task, or None if no task has that id.
        """
        with self._lock:
            task = self._tasks.pop(task_id, None)

        if task is not None:
            logger.debug(f"Deleted task {task_id}")
        return task
