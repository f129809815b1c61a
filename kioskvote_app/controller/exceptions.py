class KioskError(Exception):
    """Base exception for the kiosk controller."""
    pass


class NetworkFailure(KioskError):
    """A collaborator call (vote, precompute, commit, translations) was rejected."""
    def __init__(self, operation: str, message: str = "Request failed", status_code: int = None):
        self.operation = operation
        self.message = message
        self.status_code = status_code
        super().__init__(f"{operation}: {message}")


class AssetLoadFailure(KioskError):
    """The result image could not be fetched or is not an image."""
    def __init__(self, language: str, message: str = "Result image failed to load"):
        self.language = language
        self.message = message
        super().__init__(f"{language}: {message}")
