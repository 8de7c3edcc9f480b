"""Tests for the project profiler."""

import pytest

from autocil.errors import TargetError
from autocil.logger import AutocilLogger
from autocil.profiler import (
    DEFAULT_PACKAGE_MANAGER,
    EcosystemKind,
    PackageManager,
    WatchTask,
    detect_package_manager,
    has_docker_compose,
    load_override_commands,
    profile,
)

PYPROJECT_WITH_SCRIPTS = """\
[project]
name = "service"

[tool.autocil.scripts]
dev = "uvicorn app:main --reload"
"test:watch" = "ptw"
"lint:watch" = "ruff check --watch ."
build = "python -m build"
"""


class TestNameResolution:
    """Session and display name resolution."""

    def test_directory_name_by_default(self, make_project):
        project = make_project("plain-dir")
        result = profile(project)
        assert result.session_name == "plain-dir"
        assert result.display_name == "plain-dir"

    def test_manifest_name_used(self, make_project):
        project = make_project("dir", {"package.json": {"name": "@acme/web"}})
        result = profile(project)
        assert result.display_name == "@acme/web"
        assert result.session_name == "acme-web"

    def test_explicit_name_wins_over_manifest(self, make_project):
        project = make_project("dir", {"package.json": {"name": "from-manifest"}})
        result = profile(project, explicit_name="work")
        assert result.session_name == "work"
        assert result.display_name == "work"

    def test_explicit_name_sanitizing_to_nothing(self, make_project):
        """An explicit name like '@' falls back to the sanitized directory name."""
        project = make_project("my.app")
        result = profile(project, explicit_name="@")
        assert result.session_name == "my-app"
        assert result.display_name == "@"

    def test_manifest_name_sanitizing_to_nothing(self, make_project):
        project = make_project("web", {"package.json": {"name": "@"}})
        result = profile(project)
        assert result.session_name == "web"

    def test_dotted_directory_name_sanitized(self, make_project):
        project = make_project("site.example.com")
        result = profile(project)
        assert result.session_name == "site-example-com"
        assert result.display_name == "site.example.com"

    def test_malformed_manifest_falls_back_to_directory(self, make_project):
        project = make_project("fallback", {"package.json": "{broken"})
        logger = AutocilLogger()
        result = profile(project, logger=logger)
        assert result.session_name == "fallback"
        assert result.ecosystem_kind == EcosystemKind.NONE
        assert not result.dev_task_present
        assert len(logger.warnings) == 1


class TestManifestScripts:
    """Task extraction from package.json scripts."""

    def test_dev_watch_and_studio(self, make_project):
        project = make_project(files={"package.json": {"scripts": {
            "build": "tsc",
            "dev": "vite",
            "test:watch": "vitest",
            "css:watch": "tailwind -w",
            "db:studio": "prisma studio",
        }}})
        result = profile(project)
        assert result.ecosystem_kind == EcosystemKind.GENERIC_MANIFEST
        assert result.dev_task_present
        assert result.dev_task == WatchTask("dev", "vite")
        assert [t.name for t in result.watch_tasks] == ["test:watch", "css:watch"]
        assert result.db_studio_task_present

    def test_watch_order_follows_manifest(self, make_project):
        project = make_project(files={"package.json": {"scripts": {
            "z:watch": "a",
            "types:watch": "b",
            "a:watch": "c",
        }}})
        result = profile(project)
        assert [t.name for t in result.watch_tasks] == ["z:watch", "types:watch", "a:watch"]

    def test_non_string_scripts_ignored(self, make_project):
        project = make_project(files={"package.json": {"scripts": {"dev": 1, "x:watch": None}}})
        result = profile(project)
        assert not result.dev_task_present
        assert result.watch_tasks == ()

    def test_scripts_not_a_mapping(self, make_project):
        project = make_project(files={"package.json": {"name": "n", "scripts": ["dev"]}})
        result = profile(project)
        assert result.session_name == "n"
        assert not result.dev_task_present

    def test_manifest_not_an_object(self, make_project):
        project = make_project("arr", {"package.json": ["not", "an", "object"]})
        result = profile(project)
        assert result.session_name == "arr"
        assert result.ecosystem_kind == EcosystemKind.NONE


class TestBuildFile:
    """Task extraction from pyproject.toml."""

    def test_tool_scripts(self, make_project):
        project = make_project(files={"pyproject.toml": PYPROJECT_WITH_SCRIPTS})
        result = profile(project)
        assert result.ecosystem_kind == EcosystemKind.DECLARATIVE_BUILD_FILE
        assert result.dev_task.command == "uvicorn app:main --reload"
        assert result.dev_task.ecosystem == EcosystemKind.DECLARATIVE_BUILD_FILE
        assert [t.name for t in result.watch_tasks] == ["test:watch", "lint:watch"]

    def test_pyproject_without_tool_table(self, make_project):
        project = make_project(files={"pyproject.toml": "[project]\nname = 'x'\n"})
        result = profile(project)
        assert result.ecosystem_kind == EcosystemKind.DECLARATIVE_BUILD_FILE
        assert result.watch_tasks == ()
        assert not result.dev_task_present

    def test_malformed_pyproject_warns(self, make_project):
        project = make_project(files={"pyproject.toml": "[tool\n"})
        logger = AutocilLogger()
        result = profile(project, logger=logger)
        assert result.ecosystem_kind == EcosystemKind.NONE
        assert len(logger.warnings) == 1

    def test_both_probes_merge(self, make_project):
        project = make_project(files={
            "package.json": {"scripts": {"dev": "vite", "test:watch": "vitest"}},
            "pyproject.toml": PYPROJECT_WITH_SCRIPTS,
        })
        result = profile(project)
        assert result.ecosystem_kind == EcosystemKind.DECLARATIVE_BUILD_FILE
        # manifest dev and manifest test:watch are kept
        assert result.dev_task == WatchTask("dev", "vite")
        assert [(t.name, t.ecosystem) for t in result.watch_tasks] == [
            ("test:watch", EcosystemKind.GENERIC_MANIFEST),
            ("lint:watch", EcosystemKind.DECLARATIVE_BUILD_FILE),
        ]


class TestInvocation:
    """WatchTask.invocation per ecosystem and manager."""

    @pytest.mark.parametrize(
        "manager,expected",
        [
            (PackageManager.NPM, "npm run test:watch"),
            (PackageManager.YARN, "yarn test:watch"),
            (PackageManager.PNPM, "pnpm run test:watch"),
        ],
    )
    def test_manifest_task(self, manager, expected):
        assert WatchTask("test:watch", "vitest").invocation(manager) == expected

    def test_build_file_task_verbatim(self):
        task = WatchTask("test:watch", "ptw -- -x", EcosystemKind.DECLARATIVE_BUILD_FILE)
        assert task.invocation(PackageManager.NPM) == "ptw -- -x"


class TestPackageManager:
    """Lockfile detection."""

    @pytest.mark.parametrize(
        "lockfile,expected",
        [
            ("pnpm-lock.yaml", PackageManager.PNPM),
            ("yarn.lock", PackageManager.YARN),
            ("package-lock.json", PackageManager.NPM),
        ],
    )
    def test_lockfile(self, make_project, lockfile, expected):
        project = make_project(files={lockfile: ""})
        assert detect_package_manager(project) == expected

    def test_default_without_lockfile(self, make_project):
        assert detect_package_manager(make_project()) == DEFAULT_PACKAGE_MANAGER
        assert DEFAULT_PACKAGE_MANAGER == PackageManager.PNPM

    def test_pnpm_preferred_over_npm(self, make_project):
        project = make_project(files={"package-lock.json": "{}", "pnpm-lock.yaml": ""})
        assert detect_package_manager(project) == PackageManager.PNPM


class TestInfrastructure:
    """Docker probes."""

    @pytest.mark.parametrize(
        "filename", ["docker-compose.yml", "docker-compose.yaml", "docker-compose.json"]
    )
    def test_compose_variants(self, make_project, filename):
        assert has_docker_compose(make_project(files={filename: ""}))

    def test_no_compose(self, make_project):
        result = profile(make_project(files={"compose.txt": ""}))
        assert not result.docker_compose_present
        assert not result.dockerfile_present

    def test_dockerfile(self, make_project):
        result = profile(make_project(files={"Dockerfile": "FROM scratch\n"}))
        assert result.dockerfile_present
        assert not result.docker_compose_present


class TestOverrideCommands:
    """.autocil.yaml parsing."""

    def test_flat_list(self, make_project):
        project = make_project(files={".autocil.yaml": "- cmd1\n- cmd2\n"})
        assert load_override_commands(project) == ("cmd1", "cmd2")

    def test_commands_mapping(self, make_project):
        project = make_project(files={".autocil.yaml": "commands:\n  - make watch\n"})
        assert profile(project).override_commands == ("make watch",)

    def test_json_list_is_valid_yaml(self, make_project):
        project = make_project(files={".autocil.yaml": '["cmd1", "cmd2"]'})
        assert load_override_commands(project) == ("cmd1", "cmd2")

    def test_wrong_shape_warns(self, make_project):
        project = make_project(files={".autocil.yaml": "commands: make\n"})
        logger = AutocilLogger()
        assert load_override_commands(project, logger=logger) == ()
        assert len(logger.warnings) == 1

    def test_non_string_entries_warn(self, make_project):
        project = make_project(files={".autocil.yaml": "- cmd1\n- 3\n"})
        logger = AutocilLogger()
        assert load_override_commands(project, logger=logger) == ()
        assert len(logger.warnings) == 1

    def test_unparsable_warns(self, make_project):
        project = make_project(files={".autocil.yaml": "- [unclosed\n"})
        logger = AutocilLogger()
        assert profile(project, logger=logger).override_commands == ()
        assert len(logger.warnings) == 1

    def test_absent(self, make_project):
        assert load_override_commands(make_project()) == ()


class TestDirectoryErrors:
    """Fatal per-target conditions."""

    def test_missing_directory(self, tmp_path):
        with pytest.raises(TargetError, match="not found"):
            profile(tmp_path / "nope")

    def test_not_a_directory(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(TargetError, match="Not a directory"):
            profile(path)
