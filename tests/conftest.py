from __future__ import annotations

from pathlib import Path

import pytest

from codesentinel.patterns.compiler import RuleCompiler, default_compiler


@pytest.fixture()
def compiler() -> RuleCompiler:
    return default_compiler()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    # An empty pyproject pins config discovery to tmp_path.
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n", encoding="utf-8")
    return tmp_path
