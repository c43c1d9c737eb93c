"""gitkit: self-healing git mirrors and blob provenance."""

__version__ = "0.1.0"

from gitkit.mirror import Mirror  # noqa: E402

__all__ = ["Mirror", "__version__"]
