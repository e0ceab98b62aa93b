"""AI commit summarizer CLI tool."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("asum")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
