"""inidb CLI: read, query and rewrite INI files.

Usage:
    inidb check app.ini                     # parse, point at the first error
    inidb get app.ini Server port           # raw value
    inidb get app.ini Server port -t unsigned -d 8080
    inidb sections app.ini                  # section names and pair counts
    inidb dump app.ini -o clean.ini         # rewrite in canonical form
    inidb config                            # merged settings and where they came from
    inidb --trace check app.ini             # also print spans to stderr
"""

import argparse
import sys

from dotenv import load_dotenv
load_dotenv()

from inidb.config import load_config, list_config
from inidb.log import enable_console_export, set_level, warn
from inidb.reader import read_path
from inidb import query
from inidb.writer import dumps, write_path


# ============================================================
# HELPERS
# ============================================================

def _read(args):
    """parse args.file with the configured limits. None (and a printed error) on failure."""
    config = load_config()
    try:
        result = read_path(args.file, limits=config.limits(),
                           encoding=config.get("encoding"))
    except OSError as e:
        warn("cli", f"cannot read {args.file}: {e}")
        return None
    if not result.ok:
        _print_error(args.file, result.error)
        return None
    return result.data


def _print_error(path, error):
    print(f"  {path}: {error.summary()}")
    for line in error.caret().splitlines():
        print(f"    {line}")


_GETTERS = {
    "string": (query.get_string, str),
    "unsigned": (query.get_unsigned, int),
    "signed": (query.get_signed, int),
    "hex": (query.get_hex, lambda s: int(s, 16)),
    "float": (query.get_float, float),
    "bool": (query.get_bool, lambda s: s == "true"),
}


# ============================================================
# COMMANDS
# ============================================================

def cmd_check(args):
    """Parse a file and report."""
    data = _read(args)
    if data is None:
        return 1
    print(f"  ok ({data.count} sections, {data.pair_count} pairs)")
    return 0


def cmd_get(args):
    """Look up one value."""
    data = _read(args)
    if data is None:
        return 1

    getter, convert = _GETTERS[args.type]
    default = None
    if args.default is not None:
        try:
            default = convert(args.default)
        except ValueError:
            print(f"  bad --default for {args.type}: {args.default}")
            return 2

    value = getter(data, args.section, args.key, default)
    if value is None:
        print(f"  no {args.type} at [{args.section}] {args.key}")
        return 1
    if isinstance(value, bool):
        value = "true" if value else "false"
    print(value)
    return 0


def cmd_sections(args):
    """List sections."""
    data = _read(args)
    if data is None:
        return 1
    for section in data.sections:
        print(f"  [{section.name}] {section.count} pairs")
    return 0


def cmd_dump(args):
    """Rewrite a file in canonical form."""
    data = _read(args)
    if data is None:
        return 1
    if args.output:
        write_path(data, args.output, encoding=load_config().get("encoding"))
        print(f"  wrote {args.output}")
    else:
        sys.stdout.write(dumps(data))
    return 0


def cmd_config(args):
    """Show merged configuration."""
    for key, entry in list_config().items():
        print(f"  {key:<18} {entry['value']!s:<10} ({entry['source']})")
    return 0


# ============================================================
# PARSER
# ============================================================

def _build_parsers(subparsers):
    p = subparsers.add_parser("check", help="Parse a file and report the first error")
    p.add_argument("file")
    p.set_defaults(func=cmd_check)

    p = subparsers.add_parser("get", help="Look up a value")
    p.add_argument("file")
    p.add_argument("section")
    p.add_argument("key")
    p.add_argument("--type", "-t", choices=sorted(_GETTERS), default="string",
                   help="How to read the value (default: string)")
    p.add_argument("--default", "-d", default=None,
                   help="Returned when the key is missing or does not parse")
    p.set_defaults(func=cmd_get)

    p = subparsers.add_parser("sections", help="List section names")
    p.add_argument("file")
    p.set_defaults(func=cmd_sections)

    p = subparsers.add_parser("dump", help="Rewrite a file in canonical form")
    p.add_argument("file")
    p.add_argument("--output", "-o", default=None, help="Write here instead of stdout")
    p.set_defaults(func=cmd_dump)

    p = subparsers.add_parser("config", help="Show configuration and sources")
    p.set_defaults(func=cmd_config)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="inidb",
        description="Reads INI files into a small in-memory database.",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log parser internals")
    parser.add_argument("--trace", action="store_true",
                        help="Print OpenTelemetry spans to stderr")
    subparsers = parser.add_subparsers(dest="command")
    _build_parsers(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    set_level("debug" if args.verbose else load_config().get("log_level"))
    if args.trace:
        enable_console_export()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
