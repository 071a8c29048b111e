from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Message:
    """Base class for tag messages submitted to a backend."""


@dataclass
class Result:
    """Base class for typed results of a backend operation."""
