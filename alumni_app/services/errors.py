from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """Base for workflow failures; each subclass pins its HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class Unauthorized(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized: No token provided"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Unauthorized: Admin access required"


class BadRequest(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Member not found"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class AlreadyApproved(Conflict):
    default_detail = "You have already approved this member"


class InternalError(ServiceError):
    pass
