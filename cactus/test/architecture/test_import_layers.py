from __future__ import annotations

import ast
from pathlib import Path


def cactus_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_python_files(base: Path) -> list[Path]:
    return [p for p in sorted(base.rglob("*.py")) if "__pycache__" not in p.parts]


def read_tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def parse_imports(path: Path) -> list[tuple[str, int]]:
    imports: list[tuple[str, int]] = []
    for node in ast.walk(read_tree(path)):
        if isinstance(node, ast.Import):
            imports.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            imports.append((node.module, node.lineno))
    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def source_files() -> list[Path]:
    root = cactus_root()
    return [p for p in iter_python_files(root) if p.relative_to(root).parts[0] != "test"]


def test_services_do_not_import_cli_modules() -> None:
    root = cactus_root()
    offenders = [
        f"{path.relative_to(root)}:{line}: forbidden import '{module}'"
        for path in iter_python_files(root / "services")
        for module, line in parse_imports(path)
        if matches_prefix(module, "cactus.cli")
    ]
    assert not offenders, "services -> cli dependency violations:\n" + "\n".join(offenders)


def test_release_contracts_do_not_depend_on_services() -> None:
    root = cactus_root()
    offenders = [
        f"{path.relative_to(root)}:{line}: forbidden import '{module}'"
        for path in iter_python_files(root / "release")
        for module, line in parse_imports(path)
        if matches_prefix(module, "cactus.services") or matches_prefix(module, "cactus.cli")
    ]
    assert not offenders, "release -> services dependency violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited_to_console() -> None:
    root = cactus_root()
    offenders = [
        f"{path.relative_to(root)}:{line}: direct rich import '{module}'"
        for path in source_files()
        if path.relative_to(root).as_posix() != "output/console.py"
        for module, line in parse_imports(path)
        if matches_prefix(module, "rich")
    ]
    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def _direct_subprocess_calls(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
            continue
        func = node.func
        if func.attr in {"run", "check_output", "Popen"} and (
            isinstance(func.value, ast.Name) and func.value.id == "subprocess"
        ):
            lines.append(node.lineno)
    return lines


def test_subprocess_only_runs_through_platform_process() -> None:
    root = cactus_root()
    offenders = [
        f"{path.relative_to(root)}:{line}: direct subprocess call"
        for path in source_files()
        if path.relative_to(root).as_posix() != "platform/process.py"
        for line in _direct_subprocess_calls(read_tree(path))
    ]
    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
