"""Exceptions raised by imogen."""


class InvalidConfigurationError(ValueError):
    """Raised when an evolution run is configured in a way it cannot proceed.

    Examples are culling a population down to zero survivors or handing an
    operator no source of randomness.
    """
