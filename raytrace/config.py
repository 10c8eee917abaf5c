"""Render configuration: environment defaults and JSON render settings."""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict

from raytrace.errors import ConfigurationError

# Worker pool
RENDER_THREADS = int(os.getenv("RENDER_THREADS", "8"))
RENDER_BACKEND = os.getenv("RENDER_BACKEND", "thread").lower()

# Tracing
RENDER_MAX_DEPTH = int(os.getenv("RENDER_MAX_DEPTH", "5"))

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

BACKENDS = ("thread", "process")


@dataclass(frozen=True)
class RenderSettings:
    """Knobs of the render loop; the scene itself is built in code."""

    workers: int = RENDER_THREADS
    max_depth: int = RENDER_MAX_DEPTH
    backend: str = RENDER_BACKEND

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.max_depth < 0:
            raise ConfigurationError(f"max_depth must not be negative, got {self.max_depth}")
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}"
            )


def load_render_settings(json_path: str) -> RenderSettings:
    """Load render settings from the ``render`` section of a JSON file."""
    with open(json_path, "r") as f:
        data = json.load(f)
    return validate_render_settings(data)


def validate_render_settings(data: Dict[str, Any]) -> RenderSettings:
    """Check the structure of a settings mapping and build ``RenderSettings``.

    Keys missing from the ``render`` section fall back to the environment
    defaults.
    """
    if "render" not in data:
        raise ConfigurationError("settings must have a 'render' section")
    render = data["render"]
    if not isinstance(render, dict):
        raise ConfigurationError("'render' section must be an object")

    unknown = set(render) - {"workers", "max_depth", "backend"}
    if unknown:
        raise ConfigurationError(f"unknown render settings: {', '.join(sorted(unknown))}")

    for key in ("workers", "max_depth"):
        if key in render and (isinstance(render[key], bool) or not isinstance(render[key], int)):
            raise ConfigurationError(f"'{key}' must be an integer")
    if "backend" in render and not isinstance(render["backend"], str):
        raise ConfigurationError("'backend' must be a string")

    return RenderSettings(
        workers=render.get("workers", RENDER_THREADS),
        max_depth=render.get("max_depth", RENDER_MAX_DEPTH),
        backend=render.get("backend", RENDER_BACKEND).lower(),
    )


__all__ = [
    "RENDER_THREADS",
    "RENDER_BACKEND",
    "RENDER_MAX_DEPTH",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "BACKENDS",
    "RenderSettings",
    "load_render_settings",
    "validate_render_settings",
]
