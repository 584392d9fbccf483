class DispatchError(Exception):
    """Typed failure surfaced to the caller of the dispatch operation."""

    code = "internal"
    status = "INTERNAL"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


class Unauthenticated(DispatchError):
    code = "unauthenticated"
    status = "UNAUTHENTICATED"
    http_status = 401


class PermissionDenied(DispatchError):
    code = "permission-denied"
    status = "PERMISSION_DENIED"
    http_status = 403


class InvalidArgument(DispatchError):
    code = "invalid-argument"
    status = "INVALID_ARGUMENT"
    http_status = 400


class Internal(DispatchError):
    pass


# ---------------- COLLABORATOR FAILURES ---------------- #


class DirectoryError(Exception):
    """User directory could not be read or returned a malformed record."""


class ProviderError(Exception):
    """Messaging provider rejected or failed to accept a message."""
