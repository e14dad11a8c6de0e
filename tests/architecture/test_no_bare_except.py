"""Architecture gate: no bare ``except:`` or silently swallowed exceptions in ``src/mapo/``."""

from __future__ import annotations

import ast
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


class _ExceptScanner(ast.NodeVisitor):
    def __init__(self, rel_path: str) -> None:
        self.rel_path = rel_path
        self.violations: list[str] = []

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.type is None:
            self.violations.append(f"{self.rel_path}:{node.lineno}: bare except:")
        elif len(node.body) == 1 and isinstance(node.body[0], ast.Pass):
            self.violations.append(f"{self.rel_path}:{node.lineno}: silent swallow (except ... : pass)")
        self.generic_visit(node)


def test_no_bare_except_in_library() -> None:
    repo_root = _repo_root()
    violations: list[str] = []

    for path in sorted((repo_root / "src" / "mapo").rglob("*.py")):
        scanner = _ExceptScanner(path.relative_to(repo_root).as_posix())
        scanner.visit(ast.parse(path.read_text(encoding="utf-8-sig")))
        violations.extend(scanner.violations)

    if violations:
        raise AssertionError("Exception handling violations detected:\n" + "\n".join(f"- {v}" for v in violations))


def test_py_typed_present() -> None:
    assert (_repo_root() / "src" / "mapo" / "py.typed").exists()
