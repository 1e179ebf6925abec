"""CLI helper that prints the boundaries visited while walking a tree document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, Sequence

from ..boundary import Anchor, Boundary
from ..boundary_range import BoundaryRange
from ..errors import BoundaryError
from ..flags import Side
from ..services.settings import TREE_FORMAT_CHOICES, Settings, SettingsStore
from ..tree.loader import load_tree_file
from ..tree.nodes import Element, Node, Text
from ..utils.logging import configure_from_settings

LOGGER = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    store = SettingsStore(args.settings) if args.settings else SettingsStore()
    settings = store.load(
        overrides={
            "tree_format": args.format,
            "max_walk_steps": args.max_steps,
            "debug_logging": True if args.debug else None,
        }
    )
    configure_from_settings(settings)

    try:
        root = load_tree_file(args.file, settings.tree_format)
        if args.select is not None:
            for line in _describe_selection(_resolve_path(root, args.select), settings):
                print(line)
            return 0
        boundary = _resolve_start(root, args.start, forward=args.direction == "next")
    except BoundaryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        for issue in getattr(exc, "issues", ()):
            print(f"  - {issue}", file=sys.stderr)
        return 1

    steps = _walk(boundary, direction=args.direction, nodes=args.nodes, include_start=not args.exclude_start)
    count = 0
    for step in steps:
        if count >= settings.max_walk_steps:
            LOGGER.warning("Stopped after %d steps (max_walk_steps)", count)
            break
        line = describe(step)
        if args.anchors:
            line = f"{line} -> {_describe_anchor(step, settings)}"
        print(line)
        count += 1
    LOGGER.debug("Walked %d boundaries in %s", count, args.file)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print the boundaries visited while walking a tree document.")
    parser.add_argument("file", type=Path, help="Tree document (JSON, YAML or XML).")
    parser.add_argument("--format", choices=TREE_FORMAT_CHOICES, help="Document format; guessed from the suffix by default.")
    parser.add_argument("--direction", choices=("next", "previous"), default="next", help="Walk direction.")
    parser.add_argument(
        "--nodes",
        action="store_true",
        help="Report each node once (next_nodes/previous_nodes) instead of every boundary step.",
    )
    parser.add_argument(
        "--exclude-start",
        action="store_true",
        help="Skip the starting boundary when walking nodes.",
    )
    parser.add_argument(
        "--start",
        help="Starting boundary as PATH:SIDE, e.g. '0/2:BEFORE_OPEN'. PATH lists child indices from the root.",
    )
    parser.add_argument("--anchors", action="store_true", help="Append the (node, offset) anchor of every step.")
    parser.add_argument("--select", metavar="PATH", help="Print the range around the node at PATH instead of walking.")
    parser.add_argument("--settings", type=Path, help="Settings file to load instead of the default location.")
    parser.add_argument("--max-steps", type=int, help="Stop after this many printed boundaries.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def _resolve_path(root: Element, path: str) -> Node:
    node: Node = root
    for part in filter(None, path.strip().strip("/").split("/")):
        children = node.child_nodes
        try:
            index = int(part)
        except ValueError:
            index = -1
        if not 0 <= index < len(children):
            raise BoundaryError(f"Path segment '{part}' does not name a child", details={"path": path})
        node = children[index]
    return node


def _resolve_start(root: Element, value: str | None, *, forward: bool) -> Boundary:
    if not value:
        return Boundary(root, Side.AFTER_OPEN if forward else Side.BEFORE_CLOSE)
    path_text, _, side_text = value.rpartition(":")
    try:
        side = Side[side_text.strip().upper()]
    except KeyError:
        raise BoundaryError(f"Unknown side '{side_text}'", details={"start": value}) from None
    return Boundary(_resolve_path(root, path_text), side)


def _walk(boundary: Boundary, *, direction: str, nodes: bool, include_start: bool) -> Iterator[Boundary]:
    if nodes:
        if direction == "next":
            yield from boundary.next_nodes(include_start)
        else:
            yield from boundary.previous_nodes(include_start)
        return
    step = boundary.next if direction == "next" else boundary.previous
    while not boundary.is_null():
        yield boundary
        step()


def _describe_anchor(boundary: Boundary, settings: Settings) -> str:
    try:
        anchor = boundary.to_anchor(settings.anchor_leaves_outside)
    except BoundaryError:
        return "-"
    return format_anchor(anchor)


def _describe_selection(node: Node, settings: Settings) -> list[str]:
    selection = BoundaryRange().select_node(node).normalize(settings.normalize_exclusive)
    lines = [f"start: {describe(selection.start)}", f"end: {describe(selection.end)}"]
    try:
        static = selection.to_static_range()
    except BoundaryError:
        lines.append("static: -")
    else:
        start = format_anchor(Anchor(static.start_container, static.start_offset))
        end = format_anchor(Anchor(static.end_container, static.end_offset))
        lines.append(f"static: {start} {end}")
    return lines


def node_path(node: Node) -> str:
    """Return the slash-separated child-index path of ``node`` from its root."""

    parts: list[str] = []
    while node.parent is not None:
        parts.append(str(node.index))
        node = node.parent
    return "/" + "/".join(reversed(parts))


def format_anchor(anchor: Anchor) -> str:
    return f"{node_path(anchor.node)}@{anchor.offset}"


def describe(boundary: Boundary) -> str:
    node = boundary.node
    if node is None:
        return "null"
    if isinstance(node, Text):
        label = f"#text {node.data!r}"
    elif isinstance(node, Element):
        label = f"<{node.tag}>"
    else:
        label = type(node).__name__
    return f"{node_path(node)} {boundary.side.name} {label}"


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
