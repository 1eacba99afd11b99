from . import (
    canon,
    config,
    exceptions,
    types,
    tags,
    consolidations,
    validate,
    series,
    transform,
    utils,
    wire,
    formats,
)

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "tags",
    "consolidations",
    "validate",
    "series",
    "transform",
    "utils",
    "wire",
    "formats",
]
