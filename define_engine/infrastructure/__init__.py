"""Infrastructure layer for the define engine.

Adapters for the console, controlled terminology files and import files.
They implement the ports defined in the application layer.
"""

from .container import DependencyContainer, create_default_container

__all__ = ["DependencyContainer", "create_default_container"]
