"""YAML golden snapshots for serialized trees.

The first run writes the snapshot file; later runs compare against it and
fail with a unified diff. Set ``update=True`` (or the environment variable
``TESTRENDER_UPDATE_SNAPSHOTS=1``) to rewrite snapshots after an intended
change.

Values are normalised to YAML-safe data first:
    - component/host types → display name
    - class instances and mocks → ``<ClassName>``
    - callables in props → ``<function name>``

File format (snapshot.v1):
    schema: snapshot.v1
    value:
      type: span
      props: {}
      children: [Ada]

Usage:
    from testrender.utils.snapshots import assert_matches_snapshot

    assert_matches_snapshot(session.to_json(), tmp_path / "greeting.yaml")
"""

import difflib
import logging
import os
from pathlib import Path
from typing import Any, Union

from . import fs, validators

logger = logging.getLogger(__name__)

UPDATE_ENV_VAR = "TESTRENDER_UPDATE_SNAPSHOTS"


class SnapshotMismatchError(AssertionError):
    """Raised when a value differs from its stored snapshot."""

    pass


def _type_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    return getattr(value, "display_name", None) or getattr(value, "__name__", None) or repr(value)


def normalize(value: Any) -> Any:
    """Convert ``to_json``/``to_tree`` output into plain YAML-safe data."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if key == "type":
                out[str(key)] = _type_name(item)
            else:
                out[str(key)] = normalize(item)
        return out
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    if callable(value):
        return f"<function {getattr(value, '__name__', 'anonymous')}>"
    return f"<{type(value).__name__}>"


def _render(value: Any) -> str:
    return fs.dump_yaml({"schema": "snapshot.v1", "value": value})


def assert_matches_snapshot(value: Any, path: Union[str, Path], update: bool = False) -> None:
    """Compare ``value`` with the snapshot stored at ``path``.

    Parameters
    ----------
    value : Any
        Serialized tree (``to_json()``/``to_tree()``) or plain data.
    path : str or Path
        Snapshot YAML file.
    update : bool
        Rewrite the snapshot instead of comparing.

    Raises
    ------
    SnapshotMismatchError
        If the stored snapshot differs.
    ConfigError
        If the stored file is not a snapshot.v1 document.
    """
    path = Path(path)
    actual = normalize(value)
    update = update or os.environ.get(UPDATE_ENV_VAR) == "1"

    if update or not path.exists():
        fs.atomic_yaml_dump({"schema": "snapshot.v1", "value": actual}, path)
        logger.info("Wrote snapshot %s", path)
        return

    stored = validators.validate_snapshot_file(fs.load_yaml(path), source=str(path))
    if stored.value == actual:
        return

    diff = difflib.unified_diff(
        _render(stored.value).splitlines(),
        _render(actual).splitlines(),
        fromfile=f"{path} (stored)",
        tofile=f"{path} (received)",
        lineterm="",
    )
    raise SnapshotMismatchError(f"Snapshot mismatch for {path}:\n" + "\n".join(diff))
