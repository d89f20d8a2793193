class NoteGPTError(Exception):
    """Base class for failures surfaced to the user as a notice."""


class ConfigurationError(NoteGPTError):
    pass


class ApiError(NoteGPTError):
    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body or ""
        super().__init__(f"API {status}: {self.body}" if self.body else f"API {status}")


class NetworkError(NoteGPTError):
    pass


class StorageError(NoteGPTError):
    pass


class EmptySelectionError(NoteGPTError):
    def __init__(self, message: str = "Select text first"):
        super().__init__(message)
