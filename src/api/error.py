from fastapi import status
from libs.result import Error

# Caller-facing error kinds by HTTP status
ERROR_KINDS = {
    status.HTTP_400_BAD_REQUEST: "invalid-argument",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "permission-denied",
    status.HTTP_404_NOT_FOUND: "not-found",
    status.HTTP_412_PRECONDITION_FAILED: "failed-precondition",
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    @property
    def kind(self) -> str:
        return ERROR_KINDS.get(self.status_code, "invalid-argument")


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)
