"""Tests for architecture import boundaries.

These tests ensure that the layer boundaries are maintained:
- Core modules (application, domain) must not import from CLI
- Core modules must not import infrastructure adapters
- The domain layer must not import the application layer
"""

from __future__ import annotations

import ast
from pathlib import Path
import re

import pytest

# Root of the define_engine package
PACKAGE_ROOT = Path(__file__).parent.parent.parent.parent / "define_engine"


def get_python_files(directory: Path) -> list[Path]:
    return list(directory.rglob("*.py"))


def extract_imports_from_file(file_path: Path) -> list[str]:
    """Extract all imported module names from a Python file.

    Relative imports are returned without their leading dots, so
    ``from ...cli import app`` yields ``cli``.
    """
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    imports: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imports.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            imports.append(node.module)
    return imports


def has_forbidden_import(imports: list[str], forbidden_pattern: str) -> list[str]:
    pattern = re.compile(forbidden_pattern)
    return [imp for imp in imports if pattern.search(imp)]


def find_violations(layer: str, forbidden_pattern: str) -> list[str]:
    layer_dir = PACKAGE_ROOT / layer
    if not layer_dir.exists():
        pytest.skip(f"{layer} directory not found")
    violations = []
    for py_file in get_python_files(layer_dir):
        forbidden = has_forbidden_import(
            extract_imports_from_file(py_file), forbidden_pattern
        )
        if forbidden:
            rel_path = py_file.relative_to(PACKAGE_ROOT.parent)
            violations.append(f"{rel_path}: {forbidden}")
    return violations


class TestCLIImportBoundary:
    """Tests ensuring core modules do not import from CLI.

    The CLI layer is the outermost layer: it can import from anything, but
    nothing imports from it except CLI code itself.
    """

    @pytest.mark.parametrize("layer", ["domain", "application", "infrastructure"])
    def test_layer_does_not_import_cli(self, layer):
        """Inner layers must not import from CLI."""
        violations = find_violations(layer, r"(^|\.)cli(\.|$)")

        assert not violations, f"{layer} imports CLI modules:\n" + "\n".join(
            violations
        )


class TestInfrastructureBoundary:
    """Tests ensuring core modules depend on ports, not adapters."""

    @pytest.mark.parametrize("layer", ["domain", "application"])
    def test_core_does_not_import_infrastructure(self, layer):
        """Domain and application code must not import infrastructure."""
        violations = find_violations(layer, r"(^|\.)infrastructure(\.|$)")

        assert not violations, f"{layer} imports infrastructure:\n" + "\n".join(
            violations
        )

    def test_domain_does_not_import_application(self):
        """The domain layer knows nothing of use cases."""
        violations = find_violations("domain", r"(^|\.)application(\.|$)")

        assert not violations, "domain imports application:\n" + "\n".join(violations)

    def test_domain_does_not_touch_console_or_files(self):
        """Console and tabular I/O libraries stay out of the domain."""
        violations = find_violations("domain", r"^(rich|click|pandas)(\.|$)")

        assert not violations, "domain imports I/O libraries:\n" + "\n".join(
            violations
        )
