"""Import and call-site rules for the `maui` package."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_source_files() -> list[Path]:
    """Non-test Python files under the package."""
    root = package_root()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def read_tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def parse_imports(path: Path) -> list[ImportRef]:
    imports: list[ImportRef] = []
    for node in ast.walk(read_tree(path)):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.append(ImportRef(module=alias.name, line=node.lineno))
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            imports.append(ImportRef(module=node.module, line=node.lineno))
    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _rel(path: Path) -> str:
    return path.relative_to(package_root()).as_posix()


def test_lower_layers_do_not_import_cli() -> None:
    offenders: list[str] = []
    for path in iter_source_files():
        rel = _rel(path)
        if rel.startswith("cli/") or rel == "__main__.py":
            continue
        for item in parse_imports(path):
            if matches_prefix(item.module, "maui.cli") or matches_prefix(item.module, "typer"):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "cli dependency violations:\n" + "\n".join(offenders)


def test_checkers_do_not_import_services_layer() -> None:
    offenders: list[str] = []
    for path in iter_source_files():
        rel = _rel(path)
        if not rel.startswith(("core/", "platform/", "manifest/")):
            continue
        for item in parse_imports(path):
            if matches_prefix(item.module, "maui.services") or matches_prefix(item.module, "maui.output"):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "layering violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited_to_approved_modules() -> None:
    allowlist = {"output/console.py", "core/logging_config.py"}

    offenders: list[str] = []
    for path in iter_source_files():
        rel = _rel(path)
        if rel in allowlist:
            continue
        for item in parse_imports(path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def _direct_subprocess_calls(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue
        func = node.func
        if (
            isinstance(func, ast.Attribute)
            and func.attr in {"run", "check_output", "Popen"}
            and isinstance(func.value, ast.Name)
            and func.value.id == "subprocess"
        ):
            lines.append(node.lineno)
    return lines


def test_subprocess_only_in_process_module() -> None:
    offenders: list[str] = []
    for path in iter_source_files():
        rel = _rel(path)
        if rel == "platform/process.py":
            continue
        for line in _direct_subprocess_calls(read_tree(path)):
            offenders.append(f"{rel}:{line}: direct subprocess call outside platform/process.py")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
