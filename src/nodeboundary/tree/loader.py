"""Build reference trees from JSON, YAML or XML documents."""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterable, Sequence
from xml.etree import ElementTree as ET

import jsonschema
from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from ..errors import TreeLoadError, ValidationIssue
from .nodes import Element, Node, Text

__all__ = ["TREE_SCHEMA", "SUPPORTED_FORMATS", "load_tree", "load_tree_file", "guess_format"]

LOGGER = logging.getLogger(__name__)
MAX_SCHEMA_ERRORS = 25
SUPPORTED_FORMATS: tuple[str, ...] = ("json", "yaml", "xml")
_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    ".html": "xml",
    ".xhtml": "xml",
}

TREE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "element": {
            "type": "object",
            "required": ["tag"],
            "properties": {
                "tag": {"type": "string", "minLength": 1},
                "attributes": {"type": "object", "additionalProperties": {"type": "string"}},
                "children": {"type": "array", "items": {"$ref": "#/$defs/node"}},
            },
            "additionalProperties": False,
        },
        "node": {"oneOf": [{"type": "string"}, {"$ref": "#/$defs/element"}]},
    },
    "$ref": "#/$defs/element",
}


def load_tree(text: str, fmt: str = "json") -> Element:
    """Parse ``text`` and return the root element of the described tree."""

    fmt = (fmt or "").lower()
    if fmt not in SUPPORTED_FORMATS:
        raise TreeLoadError(
            f"Unsupported tree format '{fmt}'",
            details={"supported": list(SUPPORTED_FORMATS)},
        )
    raw = (text or "").strip()
    if not raw:
        raise TreeLoadError("Tree document is empty", details={"format": fmt})

    if fmt == "xml":
        root = _load_xml(raw)
    else:
        document = _parse_json(raw) if fmt == "json" else _parse_yaml(raw)
        _validate_document(document)
        root = _build_element(document)
    LOGGER.debug("Loaded %s tree rooted at <%s> with %d nodes", fmt, root.tag, sum(1 for _ in root.iter_descendants()) + 1)
    return root


def load_tree_file(path: Path | str, fmt: str | None = None) -> Element:
    """Read ``path`` and parse it, guessing the format from the suffix when ``fmt`` is omitted."""

    target = Path(path)
    resolved = fmt if fmt and fmt != "auto" else guess_format(target)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise TreeLoadError(f"Could not read tree file: {exc}", details={"path": str(target)}) from exc
    return load_tree(text, resolved)


def guess_format(path: Path | str) -> str:
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIX_FORMATS[suffix]
    except KeyError:
        raise TreeLoadError(
            f"Cannot infer tree format from suffix '{suffix}'",
            details={"path": str(path)},
        ) from None


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------
class DuplicateJSONKeyError(ValueError):
    """Raised when a duplicate key is encountered during JSON parsing."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Duplicate key '{key}' found in JSON object.")
        self.key = key


def _no_duplicate_keys(pairs: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    sentinel: dict[str, Any] = {}
    for key, value in pairs:
        if key in sentinel:
            raise DuplicateJSONKeyError(key)
        sentinel[key] = value
    return sentinel


def _parse_json(raw: str) -> Any:
    try:
        return json.loads(raw, object_pairs_hook=_no_duplicate_keys)
    except DuplicateJSONKeyError as exc:
        raise TreeLoadError(str(exc), issues=[ValidationIssue(message=str(exc))]) from exc
    except JSONDecodeError as exc:
        issue = ValidationIssue(message=_format_json_decode_message(exc), line=exc.lineno)
        raise TreeLoadError("Invalid JSON tree document", issues=[issue]) from exc


def _format_json_decode_message(exc: JSONDecodeError) -> str:
    snippet = exc.doc.splitlines()[exc.lineno - 1].strip() if exc.doc and exc.lineno else ""
    detail = exc.msg
    if snippet:
        return f"{detail} (line {exc.lineno}, column {exc.colno}): {snippet}"
    return f"{detail} (line {exc.lineno}, column {exc.colno})"


# ---------------------------------------------------------------------------
# YAML helpers
# ---------------------------------------------------------------------------
def _create_yaml_parser() -> YAML:
    parser = YAML(typ="safe")
    parser.allow_duplicate_keys = False
    return parser


def _parse_yaml(raw: str) -> Any:
    parser = _create_yaml_parser()
    try:
        return parser.load(raw)
    except MarkedYAMLError as exc:
        mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
        line = int(mark.line) + 1 if mark is not None else None
        detail = exc.problem or str(exc) or "Invalid YAML content"
        if exc.context:
            detail = f"{detail}; {exc.context}"
        raise TreeLoadError("Invalid YAML tree document", issues=[ValidationIssue(message=detail, line=line)]) from exc
    except YAMLError as exc:
        raise TreeLoadError("Invalid YAML tree document", issues=[ValidationIssue(message=str(exc))]) from exc


# ---------------------------------------------------------------------------
# Schema validation and construction
# ---------------------------------------------------------------------------
def _validate_document(document: Any) -> None:
    validator = jsonschema.Draft202012Validator(TREE_SCHEMA)
    issues: list[ValidationIssue] = []
    for error in validator.iter_errors(document):
        path = _format_schema_path(error.absolute_path)
        message = f"{path}: {error.message}" if path else error.message
        issues.append(ValidationIssue(message=message))
        if len(issues) >= MAX_SCHEMA_ERRORS:
            issues.append(ValidationIssue(message="Too many validation errors; stopping early."))
            break
    if issues:
        raise TreeLoadError("Tree document does not match the tree schema", issues=issues)


def _format_schema_path(path: Sequence[Any]) -> str:
    components: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            if components:
                components[-1] = f"{components[-1]}[{segment}]"
            else:
                components.append(f"[{segment}]")
        else:
            components.append(str(segment))
    return ".".join(components)


def _build_element(payload: dict[str, Any]) -> Element:
    element = Element(payload["tag"], payload.get("attributes"))
    children: list[Node] = []
    for child in payload.get("children", ()):
        if isinstance(child, str):
            children.append(Text(child))
        else:
            children.append(_build_element(child))
    if children:
        element.append(*children)
    return element


# ---------------------------------------------------------------------------
# XML helpers
# ---------------------------------------------------------------------------
def _load_xml(raw: str) -> Element:
    try:
        source = ET.fromstring(raw)
    except ET.ParseError as exc:
        line = exc.position[0] if getattr(exc, "position", None) else None
        raise TreeLoadError("Invalid XML tree document", issues=[ValidationIssue(message=str(exc), line=line)]) from exc
    return _convert_xml(source)


def _convert_xml(source: ET.Element) -> Element:
    element = Element(source.tag, dict(source.attrib))
    if _keep_text(source.text):
        element.append(Text(source.text or ""))
    for child in source:
        element.append(_convert_xml(child))
        if _keep_text(child.tail):
            element.append(Text(child.tail or ""))
    return element


def _keep_text(value: str | None) -> bool:
    return bool(value and value.strip())
