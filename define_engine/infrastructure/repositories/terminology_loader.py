"""Controlled terminology loader (infrastructure).

Reads CDISC Controlled Terminology CSV exports from disk. Each file becomes
one ``ControlledTerminology`` package whose codelists are keyed by their
NCI codelist code.

Two row layouts are accepted: the CDISC export, where a codelist header row
has an empty ``Codelist Code`` and carries the codelist's own code, and a
flat layout where every term row repeats the codelist attributes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
import warnings

import pandas as pd

from ...constants import AliasContexts, Flags, OidPrefixes
from ...domain.entities.metadata import Alias
from ...domain.entities.terminology import (
    ControlledTerminology,
    StandardCodeList,
    StandardCodeListItem,
)

if TYPE_CHECKING:
    from pathlib import Path

CODE = "Code"
CODELIST_CODE = "Codelist Code"
EXTENSIBLE = "Codelist Extensible (Yes/No)"
CODELIST_NAME = "Codelist Name"
SUBMISSION_VALUE = "CDISC Submission Value"
PREFERRED_TERM = "NCI Preferred Term"
STANDARD = "Standard and Date"


def _clean(row: dict[str, str], column: str) -> str:
    return str(row.get(column) or "").strip()


def _iter_ct_files(ct_dir: Path) -> list[Path]:
    if not ct_dir.exists():
        return []
    return sorted(ct_dir.glob("*.csv"))


def _read_rows(csv_path: Path) -> list[dict[str, str]]:
    frame = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    frame.columns = [str(column).strip() for column in frame.columns]
    return [
        {str(key): str(value) for key, value in record.items()}
        for record in frame.to_dict(orient="records")
    ]


def _package_version(standard: str) -> str | None:
    _, _, version = standard.rpartition(" ")
    return version or None


def build_package(csv_path: Path) -> ControlledTerminology:
    """Build one terminology package from a CT CSV file."""
    rows = _read_rows(csv_path)
    headers: dict[str, dict[str, str]] = {}
    terms: dict[str, list[dict[str, str]]] = {}
    for row in rows:
        codelist_code = _clean(row, CODELIST_CODE).upper()
        if codelist_code:
            terms.setdefault(codelist_code, []).append(row)
            continue
        code = _clean(row, CODE).upper()
        if code:
            headers[code] = row

    standard = next(
        (value for row in rows if (value := _clean(row, STANDARD))), csv_path.stem
    )
    code_lists: dict[str, StandardCodeList] = {}
    for code in dict.fromkeys([*headers, *terms]):
        term_rows = terms.get(code, [])
        header = headers.get(code) or (term_rows[0] if term_rows else {})
        extensible_raw = _clean(header, EXTENSIBLE) or next(
            (value for row in term_rows if (value := _clean(row, EXTENSIBLE))), ""
        )
        items = tuple(
            StandardCodeListItem(
                coded_value=_clean(row, SUBMISSION_VALUE),
                alias=(
                    Alias(name=_clean(row, CODE), context=AliasContexts.NCI_CODE)
                    if _clean(row, CODE)
                    else None
                ),
                decode=_clean(row, PREFERRED_TERM) or None,
            )
            for row in term_rows
            if _clean(row, SUBMISSION_VALUE)
        )
        code_lists[code] = StandardCodeList(
            oid=f"{OidPrefixes.CODE_LIST}{code}",
            name=_clean(header, CODELIST_NAME) or code,
            codelist_code=code,
            submission_value=(
                _clean(header, SUBMISSION_VALUE) if code in headers else None
            )
            or None,
            extensible=extensible_raw.lower() != Flags.NO.lower(),
            items=items,
        )

    return ControlledTerminology(
        oid=f"{OidPrefixes.STANDARD}CT.{csv_path.stem}",
        name=standard,
        version=_package_version(standard),
        code_lists=code_lists,
    )


def load_terminology(ct_dir: Path) -> dict[str, ControlledTerminology]:
    """Load every CT package under ``ct_dir``, keyed by package OID.

    Unreadable files are skipped with a warning.
    """
    packages: dict[str, ControlledTerminology] = {}
    for csv_path in _iter_ct_files(ct_dir):
        try:
            package = build_package(csv_path)
        except (OSError, ValueError, pd.errors.ParserError) as exc:
            warnings.warn(
                f"Failed to load controlled terminology from {csv_path}: {exc}",
                stacklevel=2,
            )
            continue
        packages[package.oid] = package
    return packages
