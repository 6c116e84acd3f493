"""CLI entry point for the letlang interpreter.

Usage:
    python -m letlang [-v|-vv|-vvv] <program_file>
    python -m letlang [-v...] --emit-ast <program_file>
    python -m letlang [-v...] --ast <ast_json_file>
    python -m letlang --tokens <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given program and write an AST JSON file next to it
  --ast         Execute a previously emitted AST JSON file
  --tokens      Print the token stream of the given program
  --no-color    Do not colour diagnostics

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Diagnostics go to stderr and make the
process exit with status 1.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_from_obj, ast_to_obj
from .diagnostics import report
from .errors import LangError
from .interpreter import Interpreter, raise_recursion_limit
from .lexer import tokenize
from .parser import parse


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program, source: str, debug_level: int, color: bool) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    except LangError as e:
        report(e, source, color=color)
        sys.exit(1)
    except RecursionError:
        print("error: maximum recursion depth exceeded", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='letlang', description="letlang interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--no-color', action='store_true', help='do not colour diagnostics')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('--tokens', metavar='PROGRAM_FILE', help='print the tokens of the given program')
    parser.add_argument('program', nargs='?', help='program file to execute')
    args = parser.parse_args(argv)
    color = not args.no_color
    raise_recursion_limit()

    if args.tokens:
        source = read_source(Path(args.tokens))
        for token in tokenize(source):
            print(repr(token))
        return

    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            program = parse(tokenize(source))
        except LangError as e:
            report(e, source, color=color)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        # the original source is not available; diagnostics show positions only
        execute(ast_from_obj(data), '', args.v, color)
        return

    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast/--tokens')
    source = read_source(Path(args.program))
    try:
        program = parse(tokenize(source))
    except LangError as e:
        report(e, source, color=color)
        sys.exit(1)
    execute(program, source, args.v, color)


if __name__ == '__main__':
    main()
