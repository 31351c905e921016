"""Port interfaces for external dependencies.

Adapters in the infrastructure layer implement these protocols.
"""

from .repositories import StandardRepositoryPort
from .services import LoggerPort

__all__ = ["LoggerPort", "StandardRepositoryPort"]
