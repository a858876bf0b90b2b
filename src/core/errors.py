"""Domain-specific exceptions for the live keypoint stream."""


class PoseStreamError(Exception):
    """Base exception for keypoint stream failures."""


class ConfigurationError(PoseStreamError, ValueError):
    """Raised at construction time when a component receives invalid parameters."""


class DecodeFailure(PoseStreamError):
    """Raised when a heatmap channel is malformed; recovered as an absent joint."""


class InferenceFailure(PoseStreamError):
    """Raised when the external heatmap model fails for a frame."""


class VideoOpenError(PoseStreamError, IOError):
    """Raised when a capture source cannot be opened for reading."""
