from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _line_count(path: Path) -> int:
    return len(path.read_text(encoding="utf-8", errors="ignore").splitlines())


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        if "dist" in path.parts:
            continue
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.module or ""


def test_no_python_module_exceeds_hard_line_limit():
    offenders = []
    for path in _python_files(ROOT):
        lines = _line_count(path)
        if lines > 1200:
            offenders.append((str(path.relative_to(ROOT)), lines))
    assert not offenders, f"Modules exceed hard 1200-line limit: {offenders}"


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "schedule_core"):
        for name in _imported_modules(path):
            if name == "schedule_infra" or name.startswith("schedule_infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_scheduling_engine_is_persistence_free():
    engine_roots = [
        ROOT / "schedule_core" / "services" / "scheduling",
        ROOT / "schedule_core" / "services" / "work_calendar",
        ROOT / "schedule_core" / "domain",
    ]
    violations: list[tuple[str, str]] = []
    for root in engine_roots:
        for path in _python_files(root):
            for name in _imported_modules(path):
                if name.split(".")[0] in {"sqlalchemy", "alembic"}:
                    violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Engine modules import persistence libraries: {violations}"
