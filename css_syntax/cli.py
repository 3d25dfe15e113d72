"""CLI for css-syntax: render, inspect and reformat value definition syntax."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .ast_nodes import (
    AtKeyword,
    BooleanExpr,
    Comma,
    Function,
    Group,
    Keyword,
    Multiplier,
    Node,
    Property,
    String,
    Token,
    Type,
)
from .batch import BatchRenderer, load_manifest
from .config import Settings
from .data import CssData, CssItem, ItemKind
from .errors import CssSyntaxError
from .generator import GenerateOptions, generate
from .l10n import Localization
from .parser import parse
from .renderer import render
from .walker import WalkOptions, walk


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="css-syntax",
        description="Render CSS value definition syntax as annotated HTML",
    )
    parser.add_argument("--data", help="Dataset JSON file or directory of spec JSON files")
    parser.add_argument("--l10n", help="Localization YAML file (defaults to the bundled one)")
    parser.add_argument("--locale", help="Locale for links and tooltips (default: en-US)")
    parser.add_argument("--config", help="Settings YAML file (default: ./css-syntax.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command")

    # render
    render_p = sub.add_parser("render", help="Render the formal syntax of a dataset item")
    render_p.add_argument("name", help="Item name, e.g. padding, @media, length-percentage")
    render_p.add_argument(
        "--kind",
        choices=[k.value for k in ItemKind],
        default=ItemKind.PROPERTY.value,
        help="Item kind (default: property)",
    )
    render_p.add_argument("--at-rule", help="Parent at-rule of an at-rule-descriptor")

    # raw
    raw_p = sub.add_parser("raw", help="Render a raw grammar ('name = grammar' or 'grammar')")
    raw_p.add_argument("syntax", help="Grammar text")

    # ast
    ast_p = sub.add_parser("ast", help="Show parsed AST (debug)")
    ast_p.add_argument("syntax", help="Grammar text")

    # format
    format_p = sub.add_parser("format", help="Print a grammar in canonical form")
    format_p.add_argument("syntax", help="Grammar text")
    format_p.add_argument("--compact", action="store_true", help="Omit optional whitespace")

    # batch
    batch_p = sub.add_parser("batch", help="Render every item of a YAML manifest")
    batch_p.add_argument("manifest", help="Manifest YAML file")
    batch_p.add_argument("--workers", type=int, default=None, help="Worker threads")
    batch_p.add_argument("--json", action="store_true", dest="as_json", help="Print results as JSON")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Commands that only need the grammar text
    try:
        if args.command == "ast":
            return _cmd_ast(args.syntax)
        elif args.command == "format":
            return _cmd_format(args.syntax, compact=args.compact)
    except CssSyntaxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        settings = Settings.load(args.config)
        settings.update({
            key: value
            for key, value in (
                ("data_path", args.data),
                ("l10n_path", args.l10n),
                ("locale", args.locale),
            )
            if value
        })
        if args.command == "render":
            return _cmd_render(settings, args.name, args.kind, args.at_rule)
        elif args.command == "raw":
            return _cmd_raw(settings, args.syntax)
        elif args.command == "batch":
            return _cmd_batch(settings, args.manifest, workers=args.workers, as_json=args.as_json)
    except CssSyntaxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _load_data(settings: Settings) -> CssData:
    if settings.data_path:
        return CssData.from_path(settings.data_path)
    return CssData()


def _render(settings: Settings, source: CssItem | str) -> str:
    return render(
        source,
        settings.locale,
        data=_load_data(settings),
        localization=Localization.load(settings.l10n_path),
        value_definition_url=settings.value_definition_url_for(),
        max_line_len=settings.max_line_len,
    )


def _cmd_render(settings: Settings, name: str, kind: str, at_rule: str | None = None) -> int:
    item_kind = ItemKind(kind)
    if item_kind is ItemKind.AT_RULE_DESCRIPTOR and not at_rule:
        print("Error: --at-rule is required for at-rule-descriptor", file=sys.stderr)
        return 1
    print(_render(settings, CssItem(item_kind, name, at_rule=at_rule)))
    return 0


def _cmd_raw(settings: Settings, syntax: str) -> int:
    print(_render(settings, syntax))
    return 0


def _cmd_ast(syntax: str) -> int:
    node = parse(syntax)
    _print_ast(node)
    return 0


def _print_ast(node: Node) -> None:
    depth = [0]

    def enter(n: Node, context: list[int]) -> None:
        print(f"{'  ' * context[0]}{_describe(n)}")
        context[0] += 1

    def leave(n: Node, context: list[int]) -> None:
        context[0] -= 1

    walk(node, WalkOptions(enter=enter, leave=leave), depth)


def _describe(node: Node) -> str:
    if isinstance(node, Group):
        flags = (" explicit" if node.explicit else "") + (" !" if node.must_produce_value else "")
        return f"Group {node.combinator.name}{flags}"
    if isinstance(node, Multiplier):
        high = "∞" if node.max is None else node.max
        comma = " comma" if node.comma_separated else ""
        return f"Multiplier {{{node.min},{high}}}{comma}"
    if isinstance(node, Type):
        return f"Type {generate(node)}"
    if isinstance(node, Property):
        return f"Property {generate(node)}"
    if isinstance(node, Function):
        return f"Function {node.name}()"
    if isinstance(node, Keyword):
        return f"Keyword {node.name}"
    if isinstance(node, AtKeyword):
        return f"AtKeyword @{node.name}"
    if isinstance(node, BooleanExpr):
        return "BooleanExpr"
    if isinstance(node, (Token, String)):
        return f"{type(node).__name__} {node.value}"
    if isinstance(node, Comma):
        return "Comma"
    return type(node).__name__


def _cmd_format(syntax: str, compact: bool = False) -> int:
    node = parse(syntax)
    print(generate(node, GenerateOptions(compact=compact)))
    return 0


def _cmd_batch(
    settings: Settings,
    manifest: str,
    workers: int | None = None,
    as_json: bool = False,
) -> int:
    items, options = load_manifest(manifest)
    if "locale" in options and settings.locale == Settings().locale:
        settings.update({"locale": options["locale"]})

    renderer = BatchRenderer(
        _load_data(settings),
        locale=settings.locale,
        localization=Localization.load(settings.l10n_path),
        value_definition_url=settings.value_definition_url_for(),
        max_line_len=settings.max_line_len,
    )
    result = renderer.render_all(items, workers=workers or settings.workers, name=manifest)

    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(result.log.summary())
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
