"""Exception types raised by the transform sender."""


class TfSenderError(Exception):
    """Base exception for all transform sender errors."""


class ConfigurationError(TfSenderError, ValueError):
    """Invalid startup or reconfiguration input.

    Raised for identical parent and child frames, malformed numeric
    arguments, unknown reconfigure fields and unknown URDF joints.
    """


class DegenerateQuaternionError(TfSenderError, ValueError):
    """A zero-length quaternion was submitted; the stored rotation is kept."""


__all__ = [
    "TfSenderError",
    "ConfigurationError",
    "DegenerateQuaternionError",
]
