"""CLI entry point for configforms."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from configforms import __version__, logger
from configforms.async_runner import run_async
from configforms.dependencies import ensure_cli_dependencies_for_submit
from configforms.exceptions import PackageError, SessionError, SpecStoreError
from configforms.form import MISSING, compile_form, serialize
from configforms.logging import configure_logging
from configforms.pointer import SnapshotFeed
from configforms.session import FormSession
from configforms.settings import Settings, get_settings
from configforms.spec_store import SpecStore, read_spec_document
from configforms.typing.models import ObjectValueSpec


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Commands taking a spec accept either a document path or a stored
    ``--package-id``/``--package-version`` pair looked up under ``SPEC_DIR``.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="configforms")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser("check", help="Load a spec document and report schema defects")
    _add_spec_arguments(check_parser)

    validate_parser = subparsers.add_parser(
        "validate",
        help="Compile a spec with a current value and print the serialized value and field errors",
    )
    _add_spec_arguments(validate_parser)
    _add_value_arguments(validate_parser)

    submit_parser = subparsers.add_parser("submit", help="Validate a value and send it to the device")
    _add_spec_arguments(submit_parser)
    submit_parser.add_argument("--rpc-url", default=None, dest="rpc_url")
    _add_value_arguments(submit_parser)

    save_parser = subparsers.add_parser("save", help="Check a spec document and store it under SPEC_DIR")
    save_parser.add_argument("spec_path", type=Path)
    save_parser.add_argument("--package-id", required=True, dest="package_id")
    save_parser.add_argument("--package-version", required=True, dest="package_version")

    subparsers.add_parser("list", help="List spec documents stored under SPEC_DIR")

    return parser


def _add_spec_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("spec_path", type=Path, nargs="?", default=None)
    parser.add_argument("--package-id", default=None, dest="package_id")
    parser.add_argument("--package-version", default=None, dest="package_version")


def _add_value_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--value", type=Path, default=None, dest="value_path")
    parser.add_argument("--snapshot", type=Path, default=None, dest="snapshot_path")


def _load_spec(args: argparse.Namespace, settings: Settings) -> ObjectValueSpec:
    """Load the spec named on the command line.

    Args:
        args (argparse.Namespace): Parsed arguments.
        settings (Settings): Runtime settings.

    Raises:
        SpecStoreError: If neither a path nor a stored package version is given.

    Returns:
        ObjectValueSpec: Root config spec.
    """
    if args.spec_path is not None:
        return SpecStore.load(args.spec_path)
    if args.package_id and args.package_version:
        store = SpecStore(root=Path(settings.spec_dir))
        return store.find(args.package_id, args.package_version)
    raise SpecStoreError(message="Give a spec path, or --package-id with --package-version")


def _read_json(path: Path | None) -> Any:
    """Read an optional JSON file.

    Args:
        path (Path | None): File path, or None.

    Returns:
        Any: Decoded payload, or ``MISSING`` when no path is given.
    """
    if path is None:
        return MISSING
    return json.loads(path.read_text(encoding="utf-8"))


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True) + "\n")


def _run_check(args: argparse.Namespace, settings: Settings) -> int:
    spec = _load_spec(args, settings)
    _print_json({"spec": spec.name, "fields": sorted(spec.spec)})
    return 0


def _run_validate(args: argparse.Namespace, settings: Settings) -> int:
    spec = _load_spec(args, settings)
    snapshot = _read_json(args.snapshot_path)
    feed = SnapshotFeed(None if snapshot is MISSING else snapshot)
    root = compile_form(spec, _read_json(args.value_path), feed=feed)
    value = serialize(root)
    errors = [{"path": error.location, "kind": error.kind.value, "message": error.message} for error in root.iter_errors()]
    _print_json({"valid": not errors, "value": value, "errors": errors})
    return 0 if not errors else 1


def _run_submit(args: argparse.Namespace, settings: Settings) -> int:
    ensure_cli_dependencies_for_submit()
    from configforms.rpc import RpcSubmitHandler  # noqa: PLC0415

    if not args.package_id:
        raise SessionError(message="submit needs --package-id to address the device")
    if args.rpc_url:
        settings = settings.model_copy(update={"rpc_url": args.rpc_url})

    snapshot = _read_json(args.snapshot_path)
    session = FormSession(
        _load_spec(args, settings),
        _read_json(args.value_path),
        handler=RpcSubmitHandler(args.package_id, settings=settings),
        feed=SnapshotFeed(None if snapshot is MISSING else snapshot),
    )
    result = run_async(session.submit())
    _print_json(result.model_dump(mode="json"))
    return 0 if result.succeeded else 1


def _run_save(args: argparse.Namespace, settings: Settings) -> int:
    store = SpecStore(root=Path(settings.spec_dir))
    path = store.save(
        package_id=args.package_id,
        version=args.package_version,
        document=read_spec_document(args.spec_path),
    )
    _print_json({"saved": str(path)})
    return 0


def _run_list(settings: Settings) -> int:
    store = SpecStore(root=Path(settings.spec_dir))
    _print_json({"specs": [path.name for path in store.list_specs()]})
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Arguments, defaults to ``sys.argv[1:]``.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "check":
            return _run_check(args, settings)
        if args.command == "validate":
            return _run_validate(args, settings)
        if args.command == "submit":
            return _run_submit(args, settings)
        if args.command == "save":
            return _run_save(args, settings)
        if args.command == "list":
            return _run_list(settings)
    except PackageError as exc:
        logger.exception("Command failed", extra={"command": args.command})
        sys.stderr.write(f"error: {exc}\n")
        return 1
    except (OSError, json.JSONDecodeError) as exc:
        logger.exception("Could not read input", extra={"command": args.command})
        sys.stderr.write(f"error: {exc}\n")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
