from fastapi import HTTPException, status


class FloorlineException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(FloorlineException):
    def __init__(self, resource: str, resource_id: str | None = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} '{resource_id}' not found"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(FloorlineException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class PersistenceError(FloorlineException):
    def __init__(self, action: str, detail: str | None = None):
        msg = f"Failed to {action}"
        if detail:
            msg += f" - {detail}"
        super().__init__(detail=msg, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class SchedulingRejection(BadRequestError):
    """A job save blocked by a business rule; ``detail`` is shown to the user."""

    def __init__(self, detail: str, reason: str):
        super().__init__(detail=detail)
        self.reason = reason
