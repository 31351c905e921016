from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities.terminology import ControlledTerminology, StandardLookup


@runtime_checkable
class StandardRepositoryPort(Protocol):
    pass

    def get(self, standard_oid: str) -> ControlledTerminology | None: ...

    def list_standards(self) -> list[ControlledTerminology]: ...

    def as_lookup(self) -> StandardLookup: ...
