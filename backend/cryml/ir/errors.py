class DiagramParseError(ValueError):
    """Raised when YAML text cannot be turned into a canonical diagram model."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path
