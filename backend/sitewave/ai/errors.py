class AIServiceError(Exception):
    """Raised when a hosted model call or its response handling fails."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code
