# ruff: noqa: E402

import json
import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import sprout.log as sprout_log
import sprout.paths as paths

DOCTEST_MODULES = {
    ROOT / "src" / "sprout" / "__init__.py",
    ROOT / "src" / "sprout" / "config.py",
    ROOT / "src" / "sprout" / "models.py",
    ROOT / "src" / "sprout" / "paths.py",
    ROOT / "src" / "sprout" / "run_instructions.py",
    ROOT / "src" / "sprout" / "template.py",
    ROOT / "src" / "sprout" / "validate.py",
    ROOT / "src" / "sprout" / "commands" / "init.py",
    ROOT / "src" / "sprout" / "services" / "project" / "init_project_args.py",
}


@pytest.fixture(autouse=True)
def _isolated_sprout_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in (
        "SPROUT_LOG_LEVEL",
        "SPROUT_NO_COLOR",
        "SPROUT_DEFAULT_TEMPLATE",
        "SPROUT_PACKAGE_MANAGER",
        "SPROUT_PYTHON",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(sprout_log, "_configured_level", None)
    monkeypatch.setattr(sprout_log, "_no_color_override", None)
    staging = tmp_path / "cache" / "staging"
    monkeypatch.setattr(paths, "staging_root", lambda: staging)
    monkeypatch.setattr(paths, "user_config_path", lambda: tmp_path / "_config" / "config.json")


@pytest.fixture
def make_template(tmp_path: Path):
    """Build a local template directory and return its root."""

    def _make(
        name: str = "hello-template",
        *,
        files: dict[str, str] | None = None,
        config: dict[str, object] | None = None,
        scripts: dict[str, str] | None = None,
    ) -> Path:
        root = tmp_path / "templates" / name
        root.mkdir(parents=True)
        payload = config or {"templateDir": "template", "placeholderName": "HelloWorld"}
        (root / "template.config.json").write_text(json.dumps(payload), encoding="utf-8")
        template_files = files or {
            "README.md": "# HelloWorld\n",
            "helloworld/__init__.py": '"""HelloWorld package."""\n',
            "HelloWorld.txt": "HelloWorld says hi\n",
        }
        for relative, content in template_files.items():
            destination = root / "template" / relative
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(content, encoding="utf-8")
        for relative, content in (scripts or {}).items():
            destination = root / relative
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(content, encoding="utf-8")
        return root

    return _make


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
