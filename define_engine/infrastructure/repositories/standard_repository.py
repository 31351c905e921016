from __future__ import annotations

from typing import TYPE_CHECKING

from ...config import EngineConfig
from .terminology_loader import load_terminology

if TYPE_CHECKING:
    from pathlib import Path

    from ...domain.entities.terminology import ControlledTerminology, StandardLookup


class StandardRepository:
    """Controlled terminology packages read lazily from the CT directory."""

    def __init__(
        self, config: EngineConfig | None = None, ct_dir: Path | None = None
    ) -> None:
        super().__init__()
        self._config = config or EngineConfig()
        self._ct_dir = ct_dir
        self._packages: dict[str, ControlledTerminology] | None = None

    @property
    def ct_dir(self) -> Path:
        return self._ct_dir if self._ct_dir is not None else self._config.ct_dir

    def get(self, standard_oid: str) -> ControlledTerminology | None:
        return self._load().get(standard_oid)

    def list_standards(self) -> list[ControlledTerminology]:
        packages = self._load()
        return [packages[oid] for oid in sorted(packages)]

    def as_lookup(self) -> StandardLookup:
        return dict(self._load())

    def clear_cache(self) -> None:
        self._packages = None

    def _load(self) -> dict[str, ControlledTerminology]:
        if self._packages is None:
            self._packages = load_terminology(self.ct_dir)
        return self._packages
