"""Error taxonomy shared by the lecture, quota and statistics services."""


class LectureVaultError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LectureVaultError):
    """Malformed or missing input. Carries per-field messages."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: str = "Validation error") -> None:
        super().__init__(message)
        self.errors = errors


class NotFoundError(LectureVaultError):
    """No record owned by the caller matches."""

    status_code = 404


class InvalidStateError(LectureVaultError):
    """Operation is not legal in the lecture's current lifecycle state."""

    status_code = 400


class QuotaExceededError(LectureVaultError):
    """Upload admission denied by the storage quota."""

    status_code = 403
