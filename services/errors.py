"""Workflow exceptions raised by the service layer.

Routers translate these into HTTP responses via ``status_code``; services never
import FastAPI.
"""


class WorkflowError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(WorkflowError):
    status_code = 400


class PermissionDenied(WorkflowError):
    status_code = 403


class NotFound(WorkflowError):
    status_code = 404


class TransitionConflict(WorkflowError):
    status_code = 409
