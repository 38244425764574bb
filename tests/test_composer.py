"""Tests for buildplan.composer -- whole-plan properties."""

from __future__ import annotations

import itertools
import json
from pathlib import Path

import pytest

from buildplan import aliases as aliases_module
from buildplan.composer import compose_plan, compose_profile, derive_toggles
from buildplan.environment import EnvironmentSnapshot
from buildplan.exceptions import AliasConflictError, MetadataError
from buildplan.models import PackageMetadata, Target, Workspace


def _all_snapshots() -> list[EnvironmentSnapshot]:
    """Every combination of mode and visualizer variables."""
    snapshots = []
    for mode, main, preload, renderer in itertools.product(
        ["development", "production", ""], ["", "1"], ["", "1"], ["", "1"]
    ):
        snapshots.append(
            EnvironmentSnapshot.capture({
                "NODE_ENV": mode,
                "VISUALIZER_MAIN": main,
                "VISUALIZER_PRELOAD": preload,
                "VISUALIZER_RENDERER": renderer,
            })
        )
    return snapshots


ALL_SNAPSHOTS = _all_snapshots()


class TestPlanShape:
    def test_profiles_in_target_order(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        assert [p.target for p in plan.profiles] == [Target.HOST, Target.BRIDGE, Target.UI]

    def test_entries_only_on_ui(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        assert plan.get(Target.HOST).entries is None
        assert plan.get(Target.BRIDGE).entries is None
        assert plan.get(Target.UI).entries is not None

    def test_externals_only_on_host(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        assert plan.get(Target.HOST).externals == (
            "bufferutil",
            "utf-8-validate",
            "electron",
            "axios",
            "zod",
        )
        assert plan.get(Target.BRIDGE).externals is None
        assert plan.get(Target.UI).externals is None

    def test_custom_static_externals(self, workspace: Workspace, make_env) -> None:
        custom = workspace.model_copy(
            update={"static_externals": ("bufferutil", "utf-8-validate", "hostRuntime")}
        )
        plan = compose_plan(make_env(), custom)
        assert set(plan.get(Target.HOST).externals) == {
            "bufferutil",
            "utf-8-validate",
            "hostRuntime",
            "axios",
            "zod",
        }

    def test_mode_recorded(self, prod_env, workspace: Workspace) -> None:
        assert compose_plan(prod_env, workspace).mode.value == "production"

    def test_output_shapes(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        assert plan.get(Target.HOST).output.single_file is True
        assert plan.get(Target.BRIDGE).output.single_file is False
        ui = plan.get(Target.UI).output
        assert ui.build_target == "esnext"
        assert ui.worker_format == "es"
        assert ui.optimize_deps_exclude == ("pyodide",)

    def test_plan_get_unknown_target(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        partial = plan.model_copy(update={"profiles": plan.profiles[:1]})
        with pytest.raises(KeyError):
            partial.get(Target.UI)


class TestToggles:
    @pytest.mark.parametrize("env", [s for s in ALL_SNAPSHOTS if s.is_dev])
    def test_dev_enables_sourcemaps_and_keeps_comments(self, env, workspace: Workspace) -> None:
        plan = compose_plan(env, workspace)
        for target in (Target.HOST, Target.UI):
            toggles = plan.get(target).toggles
            assert toggles.sourcemap is True
            assert toggles.strip_legal_comments is False

    @pytest.mark.parametrize("env", [s for s in ALL_SNAPSHOTS if s.is_prod])
    def test_prod_strips_comments_and_drops_inspection(self, env, workspace: Workspace) -> None:
        plan = compose_plan(env, workspace)
        for target in (Target.HOST, Target.UI):
            assert plan.get(target).toggles.strip_legal_comments is True
            assert plan.get(target).toggles.sourcemap is False
        assert "sourceInspection" not in plan.get(Target.UI).plugin_names

    def test_dependency_discovery_follows_dev_on_host(self, dev_env, prod_env) -> None:
        assert derive_toggles(Target.HOST, dev_env).no_dependency_discovery is True
        assert derive_toggles(Target.HOST, prod_env).no_dependency_discovery is False

    def test_bridge_uses_sourcemap_only(self, dev_env, prod_env) -> None:
        dev = derive_toggles(Target.BRIDGE, dev_env)
        prod = derive_toggles(Target.BRIDGE, prod_env)
        assert dev.sourcemap is True
        assert dev.no_dependency_discovery is False
        assert prod.strip_legal_comments is False

    def test_unset_mode_turns_everything_off(self, make_env) -> None:
        for target in Target:
            toggles = derive_toggles(target, make_env(NODE_ENV="test"))
            assert not (toggles.sourcemap or toggles.strip_legal_comments)


class TestDeterminism:
    @pytest.mark.parametrize("env", ALL_SNAPSHOTS[::5])
    def test_composing_twice_is_byte_identical(self, env, workspace: Workspace) -> None:
        assert compose_plan(env, workspace).to_json() == compose_plan(env, workspace).to_json()

    def test_target_order_does_not_matter(self, dev_env, workspace: Workspace, metadata) -> None:
        forward = {t: compose_profile(t, dev_env, workspace, metadata) for t in Target}
        backward = {t: compose_profile(t, dev_env, workspace, metadata) for t in reversed(list(Target))}
        assert forward == backward

    def test_plan_is_frozen(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        with pytest.raises(Exception):
            plan.get(Target.HOST).externals = ()  # type: ignore[misc]


class TestIsolation:
    def test_profiles_do_not_share_alias_sets(self, dev_env, workspace: Workspace) -> None:
        plan = compose_plan(dev_env, workspace)
        host = plan.get(Target.HOST).alias_map
        bridge = plan.get(Target.BRIDGE).alias_map
        ui = plan.get(Target.UI).alias_map
        assert "@main" in host and "@main" not in ui and "@main" not in bridge
        assert "@renderer" in ui and "@renderer" not in host
        assert plan.get(Target.HOST).aliases is not plan.get(Target.UI).aliases

    def test_shared_plugin_options_cannot_be_edited(
        self, dev_env, workspace: Workspace
    ) -> None:
        plan = compose_plan(dev_env, workspace)
        bridge_compiler = plan.get(Target.BRIDGE).plugins[0]
        with pytest.raises(TypeError):
            bridge_compiler.options["tsDecorators"] = False  # type: ignore[index]

        ui = plan.get(Target.UI)
        ui_compiler = ui.plugins[ui.plugin_names.index("uiCompiler")]
        assert ui_compiler.options == {"tsDecorators": True}
        assert compose_plan(dev_env, workspace).to_json() == plan.to_json()

    def test_plugin_options_serialise_as_objects(self, dev_env, workspace: Workspace) -> None:
        data = json.loads(compose_plan(dev_env, workspace).to_json())
        bridge = data["profiles"][1]
        assert bridge["plugins"][0]["options"] == {"tsDecorators": True}

    def test_ui_entry_set_is_fixed(self, workspace: Workspace) -> None:
        for env in ALL_SNAPSHOTS[::3]:
            entries = compose_plan(env, workspace).get(Target.UI).entry_map
            assert set(entries) == {
                "index",
                "miniWindow",
                "selectionToolbar",
                "selectionAction",
                "traceWindow",
            }


class TestFailures:
    def test_duplicate_alias_aborts_whole_plan(
        self, dev_env, workspace: Workspace, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        broken = aliases_module.TARGET_ALIASES[Target.UI] + (("@shared", "elsewhere"),)
        monkeypatch.setitem(aliases_module.TARGET_ALIASES, Target.UI, broken)
        with pytest.raises(AliasConflictError, match="'@shared' in target 'renderer'"):
            compose_plan(dev_env, workspace)

    def test_missing_metadata_aborts_whole_plan(self, dev_env, tmp_path: Path) -> None:
        workspace = Workspace(
            root=tmp_path, ui_root=tmp_path / "src/renderer", package=tmp_path / "package.json"
        )
        with pytest.raises(MetadataError):
            compose_plan(dev_env, workspace)

    def test_bridge_and_ui_do_not_need_metadata(self, dev_env, tmp_path: Path) -> None:
        workspace = Workspace(
            root=tmp_path, ui_root=tmp_path / "src/renderer", package=tmp_path / "package.json"
        )
        assert compose_profile(Target.UI, dev_env, workspace).entries is not None
        assert compose_profile(Target.BRIDGE, dev_env, workspace).externals is None

    def test_preloaded_metadata_skips_file(self, dev_env, tmp_path: Path) -> None:
        workspace = Workspace(
            root=tmp_path, ui_root=tmp_path / "src/renderer", package=tmp_path / "missing.json"
        )
        plan = compose_plan(dev_env, workspace, PackageMetadata(dependencies={"zod": "3"}))
        assert plan.get(Target.HOST).externals[-1] == "zod"
