"""Repository implementations for controlled terminology."""

from .standard_repository import StandardRepository
from .terminology_loader import build_package, load_terminology

__all__ = [
    "StandardRepository",
    "build_package",
    "load_terminology",
]
