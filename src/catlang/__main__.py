#!/usr/bin/env python3
"""
CLI for the cat language interpreter.

Usage:
    python -m catlang run FILE.cat
    python -m catlang check FILE.cat [--json]
    python -m catlang parse FILE.cat [--tree]
    python -m catlang [repl] [--no-color]

Examples:
    # Evaluate a program and print its final value
    python -m catlang run examples/fib.cat

    # Report syntax errors as JSON for editor integration
    python -m catlang check examples/fib.cat --json

    # Show how a program was parsed
    python -m catlang parse examples/fib.cat --tree
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def _read_source(path_str: str) -> Optional[str]:
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    return source_path.read_text()


def cmd_run(args):
    """Evaluate a source file."""
    from . import run_source, NULL

    source = _read_source(args.file)
    if source is None:
        return 1

    result = run_source(source, filename=args.file)

    if result.diagnostics:
        for diag in result.diagnostics:
            print(diag.format(), file=sys.stderr)
        return 1

    if not result.success:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1

    if result.value is not None and result.value is not NULL:
        print(result.value.inspect())
    return 0


def cmd_check(args):
    """Check a source file for syntax errors."""
    from . import Lexer, Parser

    source = _read_source(args.file)
    if source is None:
        return 1

    parser = Parser(Lexer(source, args.file))
    program = parser.parse_program()
    diagnostics = parser.diagnostics

    if args.json:
        print(json.dumps(diagnostics.to_json(), indent=2))
        return 1 if diagnostics.has_errors else 0

    if diagnostics.has_errors:
        print(diagnostics.format_all(), file=sys.stderr)
        return 1

    print(f"OK: {Path(args.file).name} - {len(program.statements)} statement(s), no errors")
    return 0


def cmd_parse(args):
    """Print the parsed form of a source file."""
    from . import parse, format_ast

    source = _read_source(args.file)
    if source is None:
        return 1

    program, errors = parse(source, args.file)
    if errors:
        for msg in errors:
            print(msg, file=sys.stderr)
        return 1

    if args.tree:
        print(format_ast(program))
    else:
        for stmt in program.statements:
            print(stmt)
    return 0


def cmd_repl(args):
    """Start the interactive shell."""
    from .repl import Shell

    Shell(color=not args.no_color).cmdloop()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m catlang',
        description='cat language interpreter',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='action')

    # run command
    run_parser = subparsers.add_parser('run', help='Evaluate a source file')
    run_parser.add_argument('file', help='cat source file')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a source file for syntax errors')
    check_parser.add_argument('file', help='cat source file')
    check_parser.add_argument('--json', action='store_true',
                              help='Report diagnostics as JSON')

    # parse command
    parse_parser = subparsers.add_parser('parse', help='Print the parsed program')
    parse_parser.add_argument('file', help='cat source file')
    parse_parser.add_argument('--tree', action='store_true',
                              help='Dump the syntax tree instead of canonical source')

    # repl command
    repl_parser = subparsers.add_parser('repl', help='Start the interactive shell (default)')
    repl_parser.add_argument('--no-color', action='store_true',
                             help='Do not color error output')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'check':
        return cmd_check(args)
    elif args.action == 'parse':
        return cmd_parse(args)
    elif args.action == 'repl':
        return cmd_repl(args)
    else:
        args.no_color = False
        return cmd_repl(args)


if __name__ == '__main__':
    sys.exit(main())
