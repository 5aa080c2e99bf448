"""Shoji CLI: inspect typed attributes and the forms built from them."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON configuration file"
    )
    parser.add_argument(
        "--schema-db",
        type=Path,
        default=None,
        help="Path to the type schema database (overrides config)"
    )
    parser.add_argument(
        "--templates-dir",
        type=Path,
        default=None,
        help="Directory of per-type layout templates (overrides config)"
    )
    parser.add_argument(
        "--supertype-templates",
        action="store_const",
        const=True,
        default=None,
        help="Try the supertype's template before the generic form"
    )
    parser.add_argument(
        "--byte-order",
        choices=["little", "big"],
        default=None,
        help="Byte order of stored type codes and numbers"
    )


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        type=Path,
        help="File whose attributes to read (or an attribute dump with --dump)"
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Treat PATH as a JSON attribute dump instead of reading its xattrs"
    )
    parser.add_argument(
        "--type",
        dest="type_identifier",
        default=None,
        help="MIME type to use instead of the detected one"
    )
    parser.add_argument(
        "--schema-lookup",
        choices=["name", "position"],
        default=None,
        help="Match schema entries by attribute name or by position (legacy)"
    )
    parser.add_argument(
        "--show-unlisted",
        action="store_const",
        const=True,
        default=None,
        help="Show attributes that have no schema entry"
    )
    parser.add_argument(
        "--foreign-xattrs",
        action="store_const",
        const=True,
        default=None,
        help="Also expose user.* xattrs outside the typed namespace"
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write JSON output to this file instead of stdout"
    )


def _load_config(args: argparse.Namespace):
    from .config import load_config

    config = load_config(args.config)
    return config.with_overrides(
        schema_db=str(args.schema_db) if args.schema_db else None,
        templates_dir=str(args.templates_dir) if args.templates_dir else None,
        include_supertype_templates=args.supertype_templates,
        byte_order=args.byte_order,
        schema_lookup=getattr(args, "schema_lookup", None),
        show_unlisted=getattr(args, "show_unlisted", None),
        include_foreign_xattrs=getattr(args, "foreign_xattrs", None),
    )


def _emit(payload, out: Optional[Path], quiet: bool, label: str) -> None:
    from ._internal.canonical_json import canonical_dumps

    text = canonical_dumps(payload)
    if out is None:
        print(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    if not quiet:
        print(f"[OK] {label} written")
        print(f"  Output: {out}")


def _report_error(error: BaseException) -> None:
    from .api import describe_error

    report = describe_error(error)
    print(f"Error: {report.title}: {report.message}", file=sys.stderr)
    print(f"  Detail: {report.detail}", file=sys.stderr)


def main():
    """Main CLI entry point for shoji commands."""
    try:
        shoji_version = get_version("shoji")
    except PackageNotFoundError:
        shoji_version = "dev"

    parser = argparse.ArgumentParser(
        prog="shoji",
        description="Shoji: forms synthesized from typed file attributes"
    )
    parser.add_argument("--version", action="version", version=f"shoji {shoji_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline decisions to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # form command
    form_parser = subparsers.add_parser(
        "form",
        help="Build the form for a file and print it as JSON",
        parents=[parent_parser]
    )
    _add_source_arguments(form_parser)
    _add_config_arguments(form_parser)

    # attrs command
    attrs_parser = subparsers.add_parser(
        "attrs",
        help="List the visible typed attributes of a file",
        parents=[parent_parser]
    )
    _add_source_arguments(attrs_parser)
    _add_config_arguments(attrs_parser)

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show which form strategy a MIME type resolves to",
        parents=[parent_parser]
    )
    resolve_parser.add_argument(
        "type_identifier",
        help="MIME type, e.g. text/x-email"
    )
    _add_config_arguments(resolve_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Lazy import: only load the pipeline when a command runs
    from .kernel.errors import ShojiError

    try:
        config = _load_config(args)

        if args.command == "form":
            from .api import form_from_dump, open_form

            build = form_from_dump if args.dump else open_form
            form = build(args.path, config=config, type_identifier=args.type_identifier)
            _emit(form.model_dump(mode="json"), args.out, args.quiet, "Form")
        elif args.command == "attrs":
            from .api import read_attributes, record_from_dump

            read = record_from_dump if args.dump else read_attributes
            record = read(args.path, config=config, type_identifier=args.type_identifier)
            _emit(record.summary(), args.out, args.quiet, "Attributes")
        elif args.command == "resolve":
            from .api import resolve_strategy

            strategy = resolve_strategy(args.type_identifier, config=config)
            print(strategy.name)
        else:
            parser.print_help()
            sys.exit(1)
    except (ShojiError, OSError, ValueError) as e:
        _report_error(e)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
