"""Error types raised by the ROI engine."""


class RoiError(ValueError):
    """Base class for all ROI engine validation failures."""


class InvalidInputError(RoiError):
    """Caller-supplied inputs are out of range or malformed."""


class InvalidConfigError(RoiError):
    """Configuration constants are out of range or malformed."""
