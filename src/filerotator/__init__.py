"""filerotator - size-triggered log file rotation."""

from filerotator.rotator import FileRotator, InvalidConfiguration

__version__ = "0.1.0"

__all__ = ["FileRotator", "InvalidConfiguration", "__version__"]
