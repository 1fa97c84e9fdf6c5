#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

from dicepy.lexer import Lexer, dump_tokens


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump lexer tokens for dice expressions")
    parser.add_argument("expression", nargs="?", help="Expression to lex, e.g. '4d6kh3 + 2'")
    parser.add_argument("--file", type=Path, help="Read one expression per line from this file instead")
    args = parser.parse_args()

    if args.file is not None:
        sources = [line for line in args.file.read_text(encoding="utf-8").splitlines() if line.strip()]
    elif args.expression is not None:
        sources = [args.expression]
    else:
        parser.error("pass an expression or --file")

    for source in sources:
        print(f"=== {source!r}")
        lexer = Lexer(source)
        tokens = lexer.lex()
        dump_tokens(tokens, source, lexer.diagnostics)


if __name__ == "__main__":
    main()
