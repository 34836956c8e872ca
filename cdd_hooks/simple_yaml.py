"""Parser for the constrained YAML subset used by `.cdd/` documents.

Supported syntax: ``key: value`` pairs nested by indentation, block lists
(``- item``) including lists of small records (``- key: value``), inline
lists (``[a, b]``), ``{}``/``[]`` literals, single or double quoted
strings, booleans, ``null``/``~``, integers and decimals, full-line
comments and trailing `` #`` comments on values.

Anything outside that subset degrades to a partial mapping. The parser
never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

ParsedDocument = Union[
    None, bool, int, float, str, List["ParsedDocument"], Dict[str, "ParsedDocument"]
]

_KEY_RE = re.compile(r"""^("[^"]*"|'[^']*'|[^\s"'\[\]{}#:][^:]*?)\s*:(?:\s+(.*))?$""")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")

_Line = Tuple[int, str]


@dataclass
class _Frame:
    """An open container and the indent of the line that owns it."""

    container: Union[Dict[str, Any], List[Any]]
    indent: int


def parse_simple_yaml(text: object) -> Dict[str, Any]:
    """Parse ``text`` into nested dicts, lists and scalars.

    Returns an empty mapping for empty or non-string input.
    """
    if not isinstance(text, str):
        return {}
    lines = _significant_lines(text)
    root: Dict[str, Any] = {}
    stack: List[_Frame] = [_Frame(root, -1)]

    for index, (indent, content) in enumerate(lines):
        if _is_list_item(content):
            _pop_for_item(stack, indent)
            owner = stack[-1].container
            if isinstance(owner, list):
                _append_item(owner, content, indent, lines, index, stack)
            continue

        match = _KEY_RE.match(content)
        if match is None:
            continue
        _pop_for_key(stack, indent)
        owner = stack[-1].container
        if not isinstance(owner, dict):
            continue
        _assign(owner, _unquote(match.group(1)), match.group(2) or "", indent, lines, index, stack)

    return root


def parse_scalar(value: str) -> Any:
    """Convert a scalar token into ``None``, ``bool``, ``int``, ``float`` or ``str``."""
    value = value.strip()
    if _is_quoted(value):
        return value[1:-1]
    stripped = _strip_comment(value)
    if stripped != value:
        return parse_scalar(stripped)
    if value in {"", "~", "null"}:
        return None
    if value == "true":
        return True
    if value == "false":
        return False
    if _NUMBER_RE.match(value):
        return float(value) if "." in value else int(value)
    return value


def parse_inline_list(value: str) -> List[Any]:
    """Parse ``[a, "b, c", 3]`` into a list of scalars."""
    inner = value.strip()[1:-1].strip()
    if not inner:
        return []
    parts: List[str] = []
    current: List[str] = []
    in_quote: Optional[str] = None
    for char in inner:
        if char in {'"', "'"}:
            if in_quote == char:
                in_quote = None
            elif in_quote is None:
                in_quote = char
            current.append(char)
            continue
        if char == "," and in_quote is None:
            part = "".join(current).strip()
            if part:
                parts.append(part)
            current = []
            continue
        current.append(char)
    if current:
        parts.append("".join(current).strip())
    return [parse_scalar(part) for part in parts if part]


def _significant_lines(text: str) -> List[_Line]:
    result: List[_Line] = []
    for raw in text.lstrip("\ufeff").splitlines():
        line = raw.rstrip()
        content = line.lstrip()
        if not content or content.startswith("#"):
            continue
        result.append((len(line) - len(content), content))
    return result


def _is_list_item(content: str) -> bool:
    return content == "-" or content.startswith("- ")


def _pop_for_key(stack: List[_Frame], indent: int) -> None:
    while len(stack) > 1 and stack[-1].indent >= indent:
        stack.pop()


def _pop_for_item(stack: List[_Frame], indent: int) -> None:
    # A block list may sit at the same indent as the key that owns it.
    while len(stack) > 1:
        top = stack[-1]
        if top.indent > indent or (top.indent == indent and not isinstance(top.container, list)):
            stack.pop()
            continue
        break


def _assign(
    owner: Dict[str, Any],
    key: str,
    raw_value: str,
    indent: int,
    lines: Sequence[_Line],
    index: int,
    stack: List[_Frame],
) -> None:
    value = _strip_comment(raw_value).strip()
    if value:
        owner[key] = _parse_value(value)
        return

    following = lines[index + 1] if index + 1 < len(lines) else None
    if following is not None and following[0] >= indent and _is_list_item(following[1]):
        items: List[Any] = []
        owner[key] = items
        stack.append(_Frame(items, indent))
    elif following is not None and following[0] > indent:
        nested: Dict[str, Any] = {}
        owner[key] = nested
        stack.append(_Frame(nested, indent))
    else:
        owner[key] = None


def _append_item(
    owner: List[Any],
    content: str,
    indent: int,
    lines: Sequence[_Line],
    index: int,
    stack: List[_Frame],
) -> None:
    rest = content[1:]
    item = rest.strip()
    record = None
    if item and not _is_quoted(item) and item[0] not in "[{":
        record = _KEY_RE.match(item)
    if record is None:
        owner.append(_parse_value(_strip_comment(item).strip()))
        return

    entry: Dict[str, Any] = {}
    owner.append(entry)
    stack.append(_Frame(entry, indent + 1))
    key_indent = indent + 1 + (len(rest) - len(rest.lstrip()))
    _assign(entry, _unquote(record.group(1)), record.group(2) or "", key_indent, lines, index, stack)


def _parse_value(value: str) -> Any:
    if value == "{}":
        return {}
    if value == "[]":
        return []
    if value.startswith("[") and value.endswith("]"):
        return parse_inline_list(value)
    return parse_scalar(value)


def _strip_comment(value: str) -> str:
    quote: Optional[str] = None
    for pos, char in enumerate(value):
        if quote is not None:
            if char == quote:
                quote = None
            continue
        if char in {'"', "'"} and (pos == 0 or value[pos - 1] in " \t,["):
            quote = char
        elif char == "#" and (pos == 0 or value[pos - 1] in " \t"):
            return value[:pos].rstrip()
    return value


def _is_quoted(value: str) -> bool:
    return len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}


def _unquote(key: str) -> str:
    key = key.strip()
    return key[1:-1] if _is_quoted(key) else key


__all__ = ["ParsedDocument", "parse_inline_list", "parse_scalar", "parse_simple_yaml"]
