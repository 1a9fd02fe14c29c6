from fastapi import status


class KanbanError(Exception):
    """Base class for errors raised by the service layer.

    Every subclass carries the HTTP status it maps to, so the exception
    handlers in ``src.main`` can render it without knowing the concrete type.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(KanbanError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input."


class UnauthenticatedError(KanbanError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication token is required."


class InvalidTokenError(KanbanError):
    """Malformed, tampered or expired token"""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token."


class ForbiddenError(KanbanError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You don't have access to this board"


class NotFoundError(KanbanError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(KanbanError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists."
