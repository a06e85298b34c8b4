"""Arabic screenplay line classification core.

This package contains the pattern library, the context-aware line classifier,
the suspicion aggregator with its agent review protocol, and the import
pipeline that decides how an extracted file enters the editor.
"""

__all__ = [
    "patterns",
    "classifier",
    "review",
    "pipeline",
]
