"""Test cross-cutting utilities.

Tests for testrender.utils:
    - fs: atomic writes, YAML roundtrip, empty files, ensure_dir
    - validators: session options, renderer.v1 config, snapshot.v1 files
    - logging_config: idempotent setup, JSON file output, context fields
    - snapshots: first write, match, mismatch diff, update, normalisation

Run:
    pytest tests/test_utils.py -v
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType

import pytest

from testrender.core.component import Component
from testrender.core.elements import create_element as h
from testrender.test_renderer import create
from testrender.utils import fs, logging_config, snapshots, validators


@pytest.fixture(scope="module")
def project_root():
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def restore_logging():
    """Undo setup_logging() side effects after a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(logging_config._installed_handlers):
        root.removeHandler(handler)
        handler.close()
    logging_config._installed_handlers.clear()
    logging_config.pop_context()
    root.setLevel(level)
    logging.captureWarnings(False)


# ============================================================================
# FS
# ============================================================================

class TestFs:

    def test_ensure_dir_creates_parents(self, tmp_path):
        target = fs.ensure_dir(tmp_path / "a" / "b")
        assert target.is_dir()

    def test_atomic_write_bytes(self, tmp_path):
        path = tmp_path / "nested" / "data.bin"
        fs.atomic_write_bytes(path, b"payload")
        assert path.read_bytes() == b"payload"
        assert not path.with_suffix(".bin.tmp").exists()

    def test_atomic_write_overwrites(self, tmp_path):
        path = tmp_path / "note.txt"
        fs.atomic_write_text(path, "one")
        fs.atomic_write_text(path, "two")
        assert path.read_text() == "two"

    def test_yaml_roundtrip_preserves_order(self, tmp_path):
        path = tmp_path / "data.yaml"
        data = {"zeta": 1, "alpha": [1, 2], "nested": {"b": "x", "a": None}}
        fs.atomic_yaml_dump(data, path)
        assert fs.load_yaml(path) == data
        assert list(fs.load_yaml(path)) == ["zeta", "alpha", "nested"]

    def test_empty_yaml_is_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert fs.load_yaml(path) == {}

    def test_missing_yaml_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            fs.load_yaml(tmp_path / "missing.yaml")


# ============================================================================
# VALIDATORS
# ============================================================================

class TestSessionOptions:

    def test_defaults(self):
        opts = validators.SessionOptions.from_value(None)
        assert opts.create_node_mock is None
        assert opts.unstable_is_async is False

    def test_unknown_keys_ignored(self):
        opts = validators.SessionOptions.from_value({"foo": 1, "unstable_is_async": True})
        assert opts.unstable_is_async is True

    def test_only_true_enables_async(self):
        for value in (1, "yes", "true", [1]):
            assert validators.SessionOptions.from_value({"unstable_is_async": value}).unstable_is_async is False

    def test_non_callable_mock_dropped(self):
        assert validators.SessionOptions.from_value({"create_node_mock": 42}).create_node_mock is None

    def test_callable_mock_kept(self):
        def mock(element):
            return "node"

        assert validators.SessionOptions.from_value({"create_node_mock": mock}).create_node_mock is mock

    def test_any_mapping_accepted(self):
        def mock(element):
            return "mock"

        opts = validators.SessionOptions.from_value(MappingProxyType({"create_node_mock": mock}))
        assert opts.create_node_mock is mock

    def test_read_only_mapping_reaches_session(self):
        session = create(h("div"), MappingProxyType({"create_node_mock": lambda element: "mock"}))
        assert session.root.instance == "mock"

    def test_model_passes_through(self):
        opts = validators.SessionOptions(unstable_is_async=True)
        assert validators.SessionOptions.from_value(opts) is opts


class TestRendererConfig:

    def test_shipped_config_is_valid(self, project_root):
        cfg = validators.load_renderer_config(project_root / "configs" / "renderer.v1.yaml")
        assert cfg.schema_version == "renderer.v1"
        assert cfg.logging.log_level == "INFO"
        assert cfg.session.unstable_is_async is False
        assert cfg.snapshot_dir == "tests/__snapshots__"

    def test_defaults_from_empty_mapping(self):
        cfg = validators.validate_renderer_config({})
        assert cfg.logging.json_format is False
        assert cfg.logging.as_kwargs()["json"] is False

    def test_log_level_case_insensitive(self):
        cfg = validators.validate_renderer_config({"logging": {"log_level": "debug"}})
        assert cfg.logging.log_level == "DEBUG"

    def test_wrong_schema_rejected(self):
        with pytest.raises(validators.ConfigError, match="Expected schema 'renderer.v1'"):
            validators.validate_renderer_config({"schema": "renderer.v2"})

    def test_unknown_key_named(self):
        with pytest.raises(validators.ConfigError, match="logging.colour"):
            validators.validate_renderer_config({"logging": {"colour": True}})

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(validators.ConfigError, match="expected a mapping"):
            validators.load_renderer_config(path)

    def test_rotate_block(self):
        cfg = validators.validate_renderer_config(
            {"logging": {"rotate": {"mode": "size", "max_bytes": 1000, "backup_count": 1}}}
        )
        assert cfg.logging.as_kwargs()["rotate"]["max_bytes"] == 1000


class TestSnapshotFile:

    def test_valid(self):
        stored = validators.validate_snapshot_file({"schema": "snapshot.v1", "value": [1, 2]})
        assert stored.value == [1, 2]

    def test_wrong_schema(self):
        with pytest.raises(validators.ConfigError, match="snapshot.v1"):
            validators.validate_snapshot_file({"schema": "renderer.v1", "value": None})

    def test_extra_keys_rejected(self):
        with pytest.raises(validators.ConfigError):
            validators.validate_snapshot_file({"schema": "snapshot.v1", "value": 1, "extra": 2})


# ============================================================================
# LOGGING
# ============================================================================

class TestLogging:

    def test_setup_is_idempotent(self, restore_logging):
        first = logging_config.setup_logging("INFO", color=False)
        second = logging_config.setup_logging("INFO", color=False)
        assert len(first["handlers"]) == 1
        assert len(second["handlers"]) == 1
        root_handlers = logging.getLogger().handlers
        assert first["handlers"][0] not in root_handlers
        assert second["handlers"][0] in root_handlers

    def test_json_file_output_with_context(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "run.log"
        logging_config.setup_logging(
            "DEBUG", str(log_file), json=True, to_stderr=False, context={"app": "snapshot"}
        )
        logging_config.push_context(session=7)
        logging_config.get_logger("testrender.test").info("committed %d nodes", 3)
        for handler in logging_config._installed_handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["msg"] == "committed 3 nodes"
        assert record["lvl"] == "INFO"
        assert record["app"] == "snapshot"
        assert record["session"] == 7

    def test_human_format_includes_context(self):
        formatter = logging_config.ContextFormatter("human", use_color=False)
        logging_config.push_context(component="Greeting")
        try:
            record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
            line = formatter.format(record)
        finally:
            logging_config.pop_context(["component"])
        assert "| WARNING  |" in line
        assert "component=Greeting |" in line
        assert line.endswith("careful")

    def test_pop_context(self):
        logging_config.push_context(a=1, b=2)
        logging_config.pop_context(["a"])
        assert logging_config.get_context() == {"b": 2}
        logging_config.pop_context()
        assert logging_config.get_context() == {}

    def test_set_level(self, restore_logging):
        logging_config.set_level("error")
        assert logging.getLogger().level == logging.ERROR

    def test_unknown_rotation_mode(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown rotation mode"):
            logging_config._create_file_handler(str(tmp_path / "x.log"), {"mode": "weekly"}, False, "UTC")

    def test_reconciler_warnings_reach_logging(self, caplog):
        class Lonely(Component):
            def render(self):
                return None

        session = create(h(Lonely))
        instance = session.get_instance()
        session.unmount()
        with caplog.at_level(logging.WARNING, logger="testrender"):
            instance.force_update()
        assert any(r.name == "testrender.reconciler.reconciler" for r in caplog.records)


# ============================================================================
# SNAPSHOTS
# ============================================================================

class Badge(Component):
    display_name = "StatusBadge"

    def render(self):
        return h("span", {"on_click": self.props.get("on_click")}, self.props["text"])


class TestSnapshots:

    def test_first_run_writes(self, tmp_path):
        path = tmp_path / "__snapshots__" / "badge.yaml"
        snapshots.assert_matches_snapshot(create(h(Badge, {"text": "ok"})).to_json(), path)
        stored = fs.load_yaml(path)
        assert stored["schema"] == "snapshot.v1"
        assert stored["value"] == {"type": "span", "props": {"on_click": None}, "children": ["ok"]}

    def test_second_run_matches(self, tmp_path):
        path = tmp_path / "badge.yaml"
        snapshots.assert_matches_snapshot(create(h(Badge, {"text": "ok"})).to_json(), path)
        snapshots.assert_matches_snapshot(create(h(Badge, {"text": "ok"})).to_json(), path)

    def test_mismatch_shows_diff(self, tmp_path):
        path = tmp_path / "badge.yaml"
        snapshots.assert_matches_snapshot(create(h(Badge, {"text": "ok"})).to_json(), path)
        with pytest.raises(snapshots.SnapshotMismatchError) as excinfo:
            snapshots.assert_matches_snapshot(create(h(Badge, {"text": "failed"})).to_json(), path)
        message = str(excinfo.value)
        assert "-  - ok" in message
        assert "+  - failed" in message
        assert isinstance(excinfo.value, AssertionError)

    def test_update_rewrites(self, tmp_path):
        path = tmp_path / "badge.yaml"
        snapshots.assert_matches_snapshot({"a": 1}, path)
        snapshots.assert_matches_snapshot({"a": 2}, path, update=True)
        assert fs.load_yaml(path)["value"] == {"a": 2}

    def test_update_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "badge.yaml"
        snapshots.assert_matches_snapshot({"a": 1}, path)
        monkeypatch.setenv(snapshots.UPDATE_ENV_VAR, "1")
        snapshots.assert_matches_snapshot({"a": 3}, path)
        assert fs.load_yaml(path)["value"] == {"a": 3}

    def test_invalid_stored_file(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("schema: other\nvalue: 1\n")
        with pytest.raises(validators.ConfigError):
            snapshots.assert_matches_snapshot(1, path)

    def test_normalize_tree(self):
        def handler():
            pass

        tree = create(h(Badge, {"text": "ok", "on_click": handler})).to_tree()
        value = snapshots.normalize(tree)
        assert value["type"] == "StatusBadge"
        assert value["instance"] == "<Badge>"
        assert value["props"]["on_click"] == "<function handler>"
        assert value["rendered"]["type"] == "span"
