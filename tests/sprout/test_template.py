from __future__ import annotations

import json
from pathlib import Path

import pytest

from sprout import exec as exec_util
from sprout import template
from sprout.services import (
    PostInitScriptError,
    TemplateConfigError,
    TemplateCopyError,
    TemplateFetchError,
)


class FakeRunner:
    def __init__(self, returncode: int = 0, on_run=None) -> None:
        self.returncode = returncode
        self.on_run = on_run
        self.requests: list[exec_util.CommandRequest] = []

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult:
        self.requests.append(request)
        if self.on_run is not None:
            self.on_run(request)
        return exec_util.CommandResult(
            argv=request.argv,
            returncode=self.returncode,
            stdout="",
            stderr="" if self.returncode == 0 else "ERROR: No matching distribution",
        )


def _write_package_template(site_dir: Path) -> None:
    package = site_dir / "acme_template"
    (package / "template").mkdir(parents=True)
    (package / "template.config.json").write_text(
        json.dumps({"templateDir": "template", "placeholderName": "HelloWorld"}),
        encoding="utf-8",
    )
    (site_dir / "acme_template-1.0.dist-info").mkdir()


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("latest", "sprout-template-default"),
        ("", "sprout-template-default"),
        ("1.2.0", "sprout-template-default==1.2.0"),
        ("~=1.2", "sprout-template-default~=1.2"),
        ("<3", "sprout-template-default<3"),
    ],
)
def test_resolve_default_template(version: str, expected: str) -> None:
    assert template.resolve_default_template(version) == expected


def test_resolve_default_template_custom_package() -> None:
    assert template.resolve_default_template("2.0", package="corp-template") == "corp-template==2.0"


def test_fetch_local_template_copies_into_staging(tmp_path: Path, make_template) -> None:
    source = make_template()
    (source / ".git").mkdir()
    staging = tmp_path / "staging"
    staging.mkdir()

    root = template.fetch_template(str(source), staging, base_dir=tmp_path, python="python3")

    assert root == staging / source.name
    assert (root / "template.config.json").is_file()
    assert not (root / ".git").exists()
    assert (source / "template.config.json").is_file()


def test_fetch_relative_template_resolves_against_base_dir(tmp_path: Path, make_template) -> None:
    make_template("relative-template")
    staging = tmp_path / "staging"
    staging.mkdir()

    root = template.fetch_template(
        "templates/relative-template", staging, base_dir=tmp_path, python="python3"
    )

    assert root.name == "relative-template"


def test_fetch_file_url_template(tmp_path: Path, make_template) -> None:
    source = make_template()
    staging = tmp_path / "staging"
    staging.mkdir()

    root = template.fetch_template(
        source.as_uri(), staging, base_dir=tmp_path, python="python3"
    )

    assert (root / "template").is_dir()


def test_fetch_missing_file_url_raises(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()

    with pytest.raises(TemplateFetchError):
        template.fetch_template(
            (tmp_path / "nope").as_uri(), staging, base_dir=tmp_path, python="python3"
        )


def test_fetch_package_template_installs_with_pip(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    runner = FakeRunner(on_run=lambda request: _write_package_template(Path(request.argv[-2])))

    root = template.fetch_template(
        "acme-template==1.0", staging, base_dir=tmp_path, python="/usr/bin/python3", runner=runner
    )

    assert root == staging / "site" / "acme_template"
    (request,) = runner.requests
    assert request.argv[:4] == ("/usr/bin/python3", "-m", "pip", "install")
    assert "--no-deps" in request.argv
    assert request.argv[-3:] == ("--target", str(staging / "site"), "acme-template==1.0")
    assert request.cwd == tmp_path


def test_fetch_package_template_failure_raises(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    runner = FakeRunner(returncode=1)

    with pytest.raises(TemplateFetchError) as exc_info:
        template.fetch_template(
            "missing-template", staging, base_dir=tmp_path, python="python3", runner=runner
        )

    assert "No matching distribution" in exc_info.value.message
    assert exc_info.value.code == "template_failed"


def test_fetch_package_without_config_raises(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    staging.mkdir()
    runner = FakeRunner(on_run=lambda request: (Path(request.argv[-2]) / "pkg").mkdir(parents=True))

    with pytest.raises(TemplateConfigError):
        template.fetch_template(
            "acme-template", staging, base_dir=tmp_path, python="python3", runner=runner
        )


def test_locate_template_root_rejects_ambiguous_site(tmp_path: Path) -> None:
    for name in ("one", "two"):
        (tmp_path / name).mkdir()
        (tmp_path / name / template.TEMPLATE_CONFIG_FILENAME).write_text("{}", encoding="utf-8")

    with pytest.raises(TemplateConfigError, match="ambiguous"):
        template.locate_template_root(tmp_path)


def test_get_template_config_reads_camel_case_keys(make_template) -> None:
    root = make_template(
        config={
            "templateDir": "template",
            "placeholderName": "HelloWorld",
            "postInitScript": "scripts/post_init.py",
        }
    )

    config = template.get_template_config(root)

    assert config.template_dir == "template"
    assert config.placeholder_name == "HelloWorld"
    assert config.post_init_script == "scripts/post_init.py"


def test_get_template_config_reads_snake_case_keys(make_template) -> None:
    root = make_template(config={"template_dir": "template", "placeholder_name": "Demo"})

    config = template.get_template_config(root)

    assert config.placeholder_name == "Demo"
    assert config.post_init_script is None


@pytest.mark.parametrize(
    "payload",
    [
        {"placeholderName": "HelloWorld"},
        {"templateDir": "../outside", "placeholderName": "HelloWorld"},
        {"templateDir": "/abs", "placeholderName": "HelloWorld"},
        {"templateDir": "template", "placeholderName": "  "},
        {"templateDir": "template", "placeholderName": "X", "postInitScript": "../evil.py"},
    ],
)
def test_get_template_config_rejects_invalid_payloads(make_template, payload: dict) -> None:
    root = make_template(config=payload)

    with pytest.raises(TemplateConfigError):
        template.get_template_config(root)


def test_get_template_config_rejects_bad_json(make_template) -> None:
    root = make_template()
    (root / template.TEMPLATE_CONFIG_FILENAME).write_text("{not json", encoding="utf-8")

    with pytest.raises(TemplateConfigError, match="Failed to read"):
        template.get_template_config(root)


def test_get_template_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TemplateConfigError, match="Couldn't find"):
        template.get_template_config(tmp_path)


def test_copy_template_merges_into_project(tmp_path: Path, make_template) -> None:
    root = make_template()
    (root / "template" / "__pycache__").mkdir()
    project_dir = tmp_path / "MyApp"
    project_dir.mkdir()

    template.copy_template(root, "template", project_dir)

    assert (project_dir / "README.md").read_text(encoding="utf-8") == "# HelloWorld\n"
    assert (project_dir / "helloworld" / "__init__.py").is_file()
    assert not (project_dir / "__pycache__").exists()


def test_copy_template_missing_source_raises(tmp_path: Path, make_template) -> None:
    root = make_template()

    with pytest.raises(TemplateCopyError):
        template.copy_template(root, "missing", tmp_path)


def test_execute_post_install_script_runs_in_project(tmp_path: Path, make_template) -> None:
    root = make_template(scripts={"scripts/post_init.py": "print('hi')\n"})
    project_dir = tmp_path / "MyApp"
    project_dir.mkdir()
    runner = FakeRunner()

    template.execute_post_install_script(
        "acme-template", root, "scripts/post_init.py", project_dir, python="py", runner=runner
    )

    (request,) = runner.requests
    assert request.argv == ("py", str(root / "scripts" / "post_init.py"))
    assert request.cwd == project_dir
    assert request.env is not None
    assert request.env["SPROUT_PROJECT_NAME"] == "MyApp"
    assert request.env["SPROUT_TEMPLATE"] == "acme-template"


def test_execute_post_install_script_failure(tmp_path: Path, make_template) -> None:
    root = make_template(scripts={"post_init.py": "raise SystemExit(3)\n"})

    with pytest.raises(PostInitScriptError):
        template.execute_post_install_script(
            "acme", root, "post_init.py", tmp_path, python="py", runner=FakeRunner(returncode=3)
        )


def test_execute_post_install_script_missing(tmp_path: Path, make_template) -> None:
    root = make_template()

    with pytest.raises(PostInitScriptError, match="not found"):
        template.execute_post_install_script(
            "acme", root, "nope.py", tmp_path, python="py", runner=FakeRunner()
        )


def test_staging_directory_is_removed_on_exit() -> None:
    with template.staging_directory() as staging:
        (staging / "file.txt").write_text("x", encoding="utf-8")
        assert staging.is_dir()

    assert not staging.exists()
