"""Import boundaries between packages."""

import ast
from pathlib import Path

import pytest

import rulegate

PACKAGE_ROOT = Path(rulegate.__file__).parent


def _imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    modules = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            modules.add(node.module)
    return modules


@pytest.mark.parametrize("layer", ["domain", "application"])
def test_inner_layers_do_not_import_outer_layers(layer: str) -> None:
    offending = {}
    for path in sorted((PACKAGE_ROOT / layer).rglob("*.py")):
        outer = sorted(
            m
            for m in _imported_modules(path)
            if m.startswith(("rulegate.infrastructure", "rulegate.interfaces"))
        )
        if outer:
            offending[str(path.relative_to(PACKAGE_ROOT))] = outer
    assert offending == {}
