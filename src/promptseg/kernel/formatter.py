"""Segment format templates.

A template mixes literal text with placeholders and groups:

    via [$symbol$version]($style)

- `$name` or `${name}` is a placeholder
- `[format](style)` applies `style` to everything rendered by `format`
- `(format)` is conditional: it renders only if at least one placeholder
  inside it resolves to a non-empty value
- `\\` escapes any of `[ ] ( ) $ \\`; before any other character it is
  literal text

Placeholder names form a closed set (see Placeholder). Anything else, as
well as unbalanced brackets, raises FormatError. Rendering is pure: the
same template and bindings always give the same output.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union


class FormatError(ValueError):
    """Raised when a template cannot be parsed or rendered."""
    pass


class Placeholder(str, Enum):
    """Placeholders a segment template may reference."""

    SYMBOL = "symbol"
    STYLE = "style"
    VERSION = "version"

    @classmethod
    def lookup(cls, name: str) -> "Placeholder":
        try:
            return cls(name)
        except ValueError:
            known = ", ".join(p.value for p in cls)
            raise FormatError(f"Unknown variable `{name}` (expected one of: {known})") from None


@dataclass(frozen=True)
class Bindings:
    """Values for every placeholder."""
    symbol: str
    style: str
    version: str

    def resolve(self, placeholder: Placeholder) -> str:
        if placeholder is Placeholder.SYMBOL:
            return self.symbol
        if placeholder is Placeholder.STYLE:
            return self.style
        if placeholder is Placeholder.VERSION:
            return self.version
        raise FormatError(f"Unhandled variable `{placeholder.value}`")


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Variable:
    placeholder: Placeholder


@dataclass(frozen=True)
class TextGroup:
    children: Tuple["Node", ...]
    style: Tuple[Union[Text, Variable], ...]


@dataclass(frozen=True)
class Conditional:
    children: Tuple["Node", ...]


Node = Union[Text, Variable, TextGroup, Conditional]


@dataclass(frozen=True)
class StyledText:
    """A run of output text and the style governing it (None = unstyled)."""
    text: str
    style: Optional[str] = None


Painter = Callable[[str, Optional[str]], str]

_NAME_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")
_ESCAPABLE = frozenset("[]()$\\")


class _Parser:
    def __init__(self, template: str):
        self.template = template
        self.pos = 0

    def error(self, message: str) -> FormatError:
        return FormatError(f"{message} at position {self.pos} in format {self.template!r}")

    def peek(self) -> Optional[str]:
        if self.pos < len(self.template):
            return self.template[self.pos]
        return None

    def parse(self) -> Tuple[Node, ...]:
        nodes = self.parse_format(closing=None)
        if self.peek() is not None:
            raise self.error(f"Unexpected `{self.peek()}`")
        return nodes

    def parse_format(self, closing: Optional[str]) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        buffer: List[str] = []

        def flush() -> None:
            if buffer:
                nodes.append(Text("".join(buffer)))
                buffer.clear()

        while True:
            char = self.peek()
            if char is None or char == closing:
                break
            if char in "])":
                raise self.error(f"Unbalanced `{char}`")
            if char == "\\":
                buffer.append(self.parse_escape())
            elif char == "$":
                flush()
                nodes.append(self.parse_variable())
            elif char == "[":
                flush()
                nodes.append(self.parse_text_group())
            elif char == "(":
                flush()
                nodes.append(self.parse_conditional())
            else:
                buffer.append(char)
                self.pos += 1
        flush()
        return tuple(nodes)

    def parse_escape(self) -> str:
        self.pos += 1
        char = self.peek()
        if char is None:
            raise self.error("Dangling escape")
        if char not in _ESCAPABLE:
            return "\\"
        self.pos += 1
        return char

    def parse_variable(self) -> Variable:
        self.pos += 1  # "$"
        braced = self.peek() == "{"
        if braced:
            self.pos += 1
        start = self.pos
        while self.peek() is not None and self.peek() in _NAME_CHARS:
            self.pos += 1
        name = self.template[start:self.pos]
        if not name:
            raise self.error("Expected a variable name after `$`")
        if braced:
            if self.peek() != "}":
                raise self.error("Unclosed `${`")
            self.pos += 1
        return Variable(Placeholder.lookup(name))

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.error(f"Expected `{char}`")
        self.pos += 1

    def parse_text_group(self) -> TextGroup:
        self.expect("[")
        children = self.parse_format(closing="]")
        self.expect("]")
        self.expect("(")
        style = self.parse_style()
        self.expect(")")
        return TextGroup(children=children, style=style)

    def parse_style(self) -> Tuple[Union[Text, Variable], ...]:
        parts: List[Union[Text, Variable]] = []
        buffer: List[str] = []
        while True:
            char = self.peek()
            if char is None or char == ")":
                break
            if char in "[](":
                raise self.error(f"Unexpected `{char}` in style")
            if char == "\\":
                buffer.append(self.parse_escape())
            elif char == "$":
                if buffer:
                    parts.append(Text("".join(buffer)))
                    buffer.clear()
                parts.append(self.parse_variable())
            else:
                buffer.append(char)
                self.pos += 1
        if buffer:
            parts.append(Text("".join(buffer)))
        return tuple(parts)

    def parse_conditional(self) -> Conditional:
        self.expect("(")
        children = self.parse_format(closing=")")
        self.expect(")")
        return Conditional(children=children)


def parse_template(template: str) -> Tuple[Node, ...]:
    """Parse a format template into nodes.

    Raises:
        FormatError: On malformed syntax or an unknown placeholder
    """
    return _Parser(template).parse()


def _join_styles(outer: Optional[str], inner: str) -> Optional[str]:
    inner = inner.strip()
    if not inner:
        return outer
    if not outer:
        return inner
    return f"{outer} {inner}"


def _shows(nodes: Tuple[Node, ...], bindings: Bindings) -> bool:
    """True if any placeholder under `nodes` resolves to a non-empty value."""
    for node in nodes:
        if isinstance(node, Variable) and bindings.resolve(node.placeholder):
            return True
        if isinstance(node, (TextGroup, Conditional)) and _shows(node.children, bindings):
            return True
    return False


def _evaluate(
    nodes: Tuple[Node, ...],
    bindings: Bindings,
    style: Optional[str],
    out: List[StyledText],
) -> None:
    for node in nodes:
        if isinstance(node, Text):
            out.append(StyledText(node.value, style))
        elif isinstance(node, Variable):
            value = bindings.resolve(node.placeholder)
            if value:
                out.append(StyledText(value, style))
        elif isinstance(node, TextGroup):
            group_style = "".join(
                part.value if isinstance(part, Text) else bindings.resolve(part.placeholder)
                for part in node.style
            )
            _evaluate(node.children, bindings, _join_styles(style, group_style), out)
        elif isinstance(node, Conditional):
            if _shows(node.children, bindings):
                _evaluate(node.children, bindings, style, out)


def format_segments(template: str, bindings: Bindings) -> List[StyledText]:
    """Render `template` into styled runs; adjacent runs sharing a style are merged.

    Raises:
        FormatError: On malformed syntax or an unknown placeholder
    """
    runs: List[StyledText] = []
    _evaluate(parse_template(template), bindings, None, runs)

    merged: List[StyledText] = []
    for run in runs:
        if merged and merged[-1].style == run.style:
            merged[-1] = StyledText(merged[-1].text + run.text, run.style)
        else:
            merged.append(run)
    return merged


def _plain(text: str, style: Optional[str]) -> str:
    return text


def render(template: str, bindings: Bindings, paint: Optional[Painter] = None) -> str:
    """Render `template` to a single string.

    Args:
        template: Format template
        bindings: Placeholder values
        paint: Wraps each styled run for presentation; defaults to plain text

    Raises:
        FormatError: If the template is invalid or `paint` rejects a style.
            No partial output is produced.
    """
    paint = paint or _plain
    return "".join(paint(run.text, run.style) for run in format_segments(template, bindings))
