class PigmntsError(Exception):
    """Base class for every error raised by pigmnts."""


class InvalidConfigurationError(PigmntsError, ValueError):
    """Raised when clustering is asked for something it cannot do (e.g. K=0 or K > samples)."""


class NaNDistanceError(PigmntsError, ArithmeticError):
    """Raised when a color distance comes out as NaN, which means a malformed input color."""


class ImageLoadError(PigmntsError):
    """Raised when an input image cannot be opened or decoded. The cause is chained."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
