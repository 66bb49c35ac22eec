"""
Error taxonomy for the rental workflow services.

Services raise these; main.py maps them to HTTP responses using
`status_code`.
"""


class WorkflowError(Exception):
     """Base class for errors surfaced to the caller."""
     status_code = 500

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class ValidationError(WorkflowError):
     """Malformed or missing input."""
     status_code = 400


class ForbiddenError(WorkflowError):
     """Caller is not the authorized party for the entity."""
     status_code = 403


class NotFoundError(WorkflowError):
     """Referenced entity does not exist."""
     status_code = 404


class ConflictError(WorkflowError):
     """Store-level uniqueness violation that could not be resolved by reuse."""
     status_code = 409


class InternalError(WorkflowError):
     """Store or unexpected failure."""
     status_code = 500
