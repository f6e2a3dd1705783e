"""Release information."""

VERSION = "0.1.3"
COMMIT = "unknown"
BUILD_DATE = "unknown"


def info() -> str:
    """Return the multi-line version text shown by the command line."""
    return f"focst {VERSION}\ncommit: {COMMIT}\nbuild: {BUILD_DATE}"