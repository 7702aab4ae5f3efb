"""Render a component from the command line and print its serialized tree.

Loads ``module:attr``, builds an element with optional JSON props, renders
it, and prints (or atomically writes) the result:
    - json  host-only view (``to_json``), pretty-printed JSON
    - yaml  host-only view, normalised like a stored snapshot
    - tree  full composite + host view (``to_tree``), normalised YAML

With ``--shallow`` the shallow engine renders one level deep and the output
is the rendered element description.

Refactored architecture:
    - snapshot_main(target, props, fmt, shallow, unstable_is_async) → str
        * Callable function (used by tests)
    - CLI entry point: main(argv) → exit code

CLI:
    python scripts/snapshot.py myapp.widgets:Greeting --props '{"name": "Ada"}'
    python scripts/snapshot.py myapp.widgets:Greeting --format tree \\
                               --output out/greeting.yaml
    python scripts/snapshot.py myapp.widgets:Ticker --async

Exit codes:
    0  success
    1  the component failed to import or render
    2  bad arguments (argparse, malformed --props, invalid config)
"""

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from testrender.core.elements import Element, create_element, get_type_name
from testrender.shallow import create_renderer
from testrender.test_renderer import create
from testrender.utils import fs, logging_config, snapshots, validators

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "configs/renderer.v1.yaml"


class UsageError(Exception):
    """Bad command-line input (exit code 2)."""

    pass


def load_target(target: str) -> Any:
    """Import ``module:attr`` (attr may be dotted)."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise UsageError(f"TARGET must look like 'package.module:Component', got '{target}'")
    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    return obj


def parse_props(raw: Optional[str]) -> Dict[str, Any]:
    if raw is None:
        return {}
    try:
        props = json.loads(raw)
    except json.JSONDecodeError as e:
        raise UsageError(f"--props is not valid JSON: {e}") from e
    if not isinstance(props, dict):
        raise UsageError(f"--props must be a JSON object, got {type(props).__name__}")
    return props


def _describe_shallow(output: Any) -> Any:
    if isinstance(output, Element):
        return {
            "type": get_type_name(output.type),
            "props": {k: _describe_shallow(v) for k, v in output.props.items()},
        }
    if isinstance(output, (list, tuple)):
        return [_describe_shallow(item) for item in output]
    return output


def snapshot_main(
    target: str,
    props: Optional[Dict[str, Any]] = None,
    fmt: str = "json",
    shallow: bool = False,
    unstable_is_async: bool = False,
) -> str:
    """Render ``target`` and return the serialized output as text.

    Parameters
    ----------
    target : str
        ``module:attr`` naming a component.
    props : dict, optional
        Props for the root element.
    fmt : str
        "json", "yaml" or "tree".
    shallow : bool
        Use the shallow engine instead of a full session.
    unstable_is_async : bool
        Render in async mode and flush before serializing.

    Returns
    -------
    str
        Serialized output, newline-terminated.
    """
    component = load_target(target)
    element = create_element(component, props or {})

    if shallow:
        renderer = create_renderer()
        value = _describe_shallow(renderer.render(element))
        renderer.unmount()
    else:
        session = create(element, {"unstable_is_async": unstable_is_async})
        if unstable_is_async:
            session.unstable_flush_all()
        value = session.to_tree() if fmt == "tree" else session.to_json()
        session.unmount()

    value = snapshots.normalize(value)
    logger.info("Rendered %s (%s, %s)", target, "shallow" if shallow else "full", fmt)
    if fmt == "json":
        return json.dumps(value, indent=2, sort_keys=True) + "\n"
    return fs.dump_yaml(value)


def main(argv: Optional[list] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Render a component and print its serialized tree"
    )
    parser.add_argument(
        "target",
        type=str,
        help="Component to render, as package.module:Component",
    )
    parser.add_argument(
        "--props",
        type=str,
        default=None,
        help="Root props as a JSON object",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml", "tree"),
        default="json",
        help="Output format (tree = composite + host view)",
    )
    parser.add_argument(
        "--shallow",
        action="store_true",
        help="Render one level deep with the shallow engine",
    )
    parser.add_argument(
        "--async",
        dest="unstable_is_async",
        action="store_true",
        help="Render in async mode and flush before serializing",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Renderer config (default: {DEFAULT_CONFIG} if present)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write to this file instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        default=None,
        help="Override the configured log level",
    )

    args = parser.parse_args(argv)

    try:
        config_path = args.config or (DEFAULT_CONFIG if Path(DEFAULT_CONFIG).exists() else None)
        config = (
            validators.load_renderer_config(config_path) if config_path else validators.RendererConfigV1()
        )
        log_kwargs = config.logging.as_kwargs()
        if args.log_level:
            log_kwargs["log_level"] = args.log_level
        logging_config.setup_logging(**log_kwargs, context={"app": "snapshot"})
        logging_config.install_excepthook()
        logging_config.push_context(target=args.target)
        props = parse_props(args.props)
    except (UsageError, validators.ConfigError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        text = snapshot_main(
            args.target,
            props=props,
            fmt=args.format,
            shallow=args.shallow,
            unstable_is_async=args.unstable_is_async or config.session.unstable_is_async,
        )
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except Exception:
        logger.exception("Failed to render %s", args.target)
        return 1

    if args.output:
        fs.atomic_write_text(args.output, text)
        logger.info("Wrote %s", args.output)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
