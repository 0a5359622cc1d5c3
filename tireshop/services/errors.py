class ServiceError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class InvalidStateError(ServiceError):
    status_code = 409


class TotalsMismatchError(ServiceError):
    """Client-submitted totals disagree with the server-side recomputation."""
    status_code = 422

    def __init__(self, message, mismatches=None):
        super().__init__(message)
        self.mismatches = mismatches or {}
