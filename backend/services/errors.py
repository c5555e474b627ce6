# backend/services/errors.py
# Error taxonomy shared by services; main.py maps it onto HTTP responses.


class ServiceError(Exception):
    status_code = 500

    def __init__(self, detail: str = "Internal error"):
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(ServiceError, ValueError):
    status_code = 400


class UnauthorizedError(ServiceError, PermissionError):
    status_code = 401


class ForbiddenError(ServiceError, PermissionError):
    status_code = 403


class NotFoundError(ServiceError, LookupError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class PersistenceError(ServiceError):
    status_code = 500


class StoreUnavailableError(ServiceError):
    status_code = 503
