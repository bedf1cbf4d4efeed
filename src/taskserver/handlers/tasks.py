"""
=============================================================================
TASK HANDLER
=============================================================================

Business logic for the four task endpoints.

    ┌──────────┬──────────────┬───────────────────────────┬──────────────┐
    │ Method   │ Path         │ Success                   │ Failure      │
    ├──────────┼──────────────┼───────────────────────────┼──────────────┤
    │ GET      │ /tasks       │ 200  [task, ...]          │ -            │
    │ POST     │ /tasks       │ 201  task                 │ 400          │
    │ PUT      │ /tasks/<id>  │ 200  task                 │ 400, 404     │
    │ DELETE   │ /tasks/<id>  │ 200  task (as removed)    │ 400, 404     │
    │ other    │ any          │ -                         │ 404          │
    └──────────┴──────────────┴───────────────────────────┴──────────────┘

=============================================================================
ORDER OF CHECKS
=============================================================================

    POST /tasks          braces? ──► decode NewTask ──► create
    PUT /tasks/<id>      id ok? ──► braces? ──► decode UpdateTask ──► update
    DELETE /tasks/<id>   id ok? ──► delete

Each check that fails raises a RequestError; handle() turns it into a
plain-text response. The store is never consulted for a request that
failed an earlier check.

=============================================================================
"""

import logging

from ..codec import (
    EnvelopeError,
    parse_new_task,
    parse_update_task,
    dumps_task,
    dumps_tasks,
)
from ..http.errors import (
    RequestError,
    MissingJsonBraces,
    JsonParseFailure,
    TaskNotFound,
)
from ..http.request import HTTPRequest, parse_task_id
from ..http.response import HTTPResponse, ok, created, error_response
from ..http.router import Router
from ..store import TaskStore


logger = logging.getLogger(__name__)


class TaskHandler:
    """
    Routes scanned requests to a TaskStore and formats the responses.

    One instance is shared by every worker thread. It holds no mutable
    state of its own; all shared state lives in the store.

    Usage:
        handler = TaskHandler(TaskStore())
        response = handler.handle(request)
    """

    def __init__(self, store: TaskStore):
        self.store = store

        self.router = Router()
        self.router.add_route("/tasks", self.list_tasks, method="GET")
        self.router.add_route("/tasks", self.create_task, method="POST")
        self.router.add_route("/tasks/*id", self.update_task, method="PUT")
        self.router.add_route("/tasks/*id", self.delete_task, method="DELETE")

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the single response for a request.

        Request errors are answered here and never propagate. Any other
        exception is a bug and is left to the caller.
        """
        try:
            return self.router.handle(request)
        except RequestError as e:
            logger.debug(f"{request.method} {request.path} rejected: {e.message}")
            return error_response(e.status_code, e.message)

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    def list_tasks(self, request: HTTPRequest) -> HTTPResponse:
        return ok(dumps_tasks(self.store.list_tasks()))

    def create_task(self, request: HTTPRequest) -> HTTPResponse:
        try:
            body = request.json_body()
        except MissingJsonBraces as e:
            raise MissingJsonBraces(e.missing, "Invalid JSON format") from None

        try:
            new_task = parse_new_task(body)
        except EnvelopeError as e:
            logger.debug(f"Rejected task body: {e}")
            raise JsonParseFailure("Invalid JSON") from e

        task = self.store.create_task(new_task.description)
        return created(dumps_task(task))

    def update_task(self, request: HTTPRequest) -> HTTPResponse:
        task_id = parse_task_id(request.path_params["id"])
        body = request.json_body()

        try:
            changes = parse_update_task(body)
        except EnvelopeError as e:
            logger.debug(f"Rejected update body for task {task_id}: {e}")
            raise JsonParseFailure("Invalid JSON body") from e

        task = self.store.update_task(
            task_id,
            description=changes.description,
            completed=changes.completed,
        )
        if task is None:
            raise TaskNotFound(task_id)
        return ok(dumps_task(task))

    def delete_task(self, request: HTTPRequest) -> HTTPResponse:
        task_id = parse_task_id(request.path_params["id"])

        task = self.store.delete_task(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return ok(dumps_task(task))
