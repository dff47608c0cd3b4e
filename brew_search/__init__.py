"""brew-search — interactive Homebrew package browser."""

__version__ = "0.1.0"

# Stamped by the release build.
__commit__ = "none"
__build_date__ = "unknown"
