"""
Tokenizer and recursive descent parser for the nginx-like config syntax.

Example:
    exporter {
        port 63107;
        prefix "envirobly";
    }

    filesystem {
        exclude "/boot/efi";
        exclude "/var/lib/docker/volumes";
        update_interval 10s;
    }

Grammar:
    document  := (block | directive)*
    block     := IDENTIFIER [STRING] '{' (block | directive)* '}'
    directive := IDENTIFIER value* ';'
    value     := STRING | NUMBER | DURATION | BOOLEAN | IDENTIFIER
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class TokenType(Enum):
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    DURATION = auto()
    BOOLEAN = auto()
    LBRACE = auto()
    RBRACE = auto()
    SEMICOLON = auto()
    EOF = auto()


VALUE_TOKENS = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.STRING,
        TokenType.NUMBER,
        TokenType.DURATION,
        TokenType.BOOLEAN,
    }
)


@dataclass
class Token:
    type: TokenType
    value: Any
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class ParseError(Exception):
    """Raised for malformed configuration text."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"Line {line}, column {column}: {message}"
        super().__init__(message)


BOOLEAN_KEYWORDS = {"on": True, "off": False, "true": True, "false": False}

# Duration units in seconds
DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600, "d": 86400}

_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<line_comment>\#[^\n]*)
    | (?P<block_comment>/\*.*?\*/)
    | (?P<string>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')
    | (?P<number>\d+(?:\.\d+)?)(?P<unit>[A-Za-z]+)?
    | (?P<identifier>[A-Za-z_][A-Za-z0-9_\-]*)
    | (?P<punct>[{};])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}
_PUNCT = {"{": TokenType.LBRACE, "}": TokenType.RBRACE, ";": TokenType.SEMICOLON}


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens, ending with EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0

    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        column = pos - line_start + 1

        if match is None:
            char = source[pos]
            if source.startswith("/*", pos):
                raise ParseError("Unterminated multi-line comment", line, column)
            if char in "\"'":
                raise ParseError("Unterminated string literal", line, column)
            raise ParseError(f"Unexpected character: {char!r}", line, column)

        kind = match.lastgroup if match.lastgroup != "unit" else "number"
        text = match.group(0)

        if kind == "string":
            tokens.append(Token(TokenType.STRING, _unescape(text[1:-1]), line, column))
        elif kind == "number":
            number_text = match.group("number")
            number = float(number_text) if "." in number_text else int(number_text)
            unit = match.group("unit")
            if unit:
                unit = unit.lower()
                if unit not in DURATION_UNITS:
                    raise ParseError(f"Unknown duration unit: {unit}", line, column)
                tokens.append(Token(TokenType.DURATION, number * DURATION_UNITS[unit], line, column))
            else:
                tokens.append(Token(TokenType.NUMBER, number, line, column))
        elif kind == "identifier":
            lowered = text.lower()
            if lowered in BOOLEAN_KEYWORDS:
                tokens.append(Token(TokenType.BOOLEAN, BOOLEAN_KEYWORDS[lowered], line, column))
            else:
                tokens.append(Token(TokenType.IDENTIFIER, text, line, column))
        elif kind == "punct":
            tokens.append(Token(_PUNCT[text], text, line, column))

        newlines = text.count("\n")
        if newlines:
            line += newlines
            line_start = pos + text.rfind("\n") + 1
        pos = match.end()

    tokens.append(Token(TokenType.EOF, "", line, pos - line_start + 1))
    return tokens


@dataclass
class Directive:
    """
    A directive with a name and values.

        port 63107;          -> Directive("port", [63107])
        exclude "/boot/efi"; -> Directive("exclude", ["/boot/efi"])
    """

    name: str
    values: list[Any] = field(default_factory=list)
    line: int = 0

    @property
    def value(self) -> Any:
        return self.values[0] if self.values else None


@dataclass
class Block:
    """A `type ["name"] { ... }` block."""

    type: str
    name: str | None = None
    directives: list[Directive] = field(default_factory=list)
    blocks: list["Block"] = field(default_factory=list)
    line: int = 0

    def get_directive(self, name: str) -> Directive | None:
        for directive in self.directives:
            if directive.name == name:
                return directive
        return None

    def get_value(self, name: str, default: Any = None) -> Any:
        """Value of the first directive with this name."""
        directive = self.get_directive(name)
        if directive is not None and directive.values:
            return directive.value
        return default

    def get_all_values(self, name: str) -> list[Any]:
        """
        Values of every directive with this name, in order.

            exclude "/boot/efi";
            exclude "/var/lib/docker/volumes";
        -> ["/boot/efi", "/var/lib/docker/volumes"]
        """
        values: list[Any] = []
        for directive in self.directives:
            if directive.name == name:
                values.extend(directive.values)
        return values

    def get_block(self, type_name: str) -> "Block | None":
        for block in self.blocks:
            if block.type == type_name:
                return block
        return None


@dataclass
class ConfigDocument(Block):
    """Top-level document; behaves like an unnamed block."""

    type: str = "<document>"
    filename: str = "<string>"


class ConfigParser:
    """Recursive descent parser over a token list."""

    def __init__(self, source: str, filename: str = "<string>"):
        self.filename = filename
        self.tokens = tokenize(source)
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _take(self) -> Token:
        token = self.tokens[self.index]
        if token.type is not TokenType.EOF:
            self.index += 1
        return token

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self.current.line, self.current.column)

    def parse(self) -> ConfigDocument:
        document = ConfigDocument(filename=self.filename)
        self._parse_body(document, closing=None)
        return document

    def _parse_body(self, block: Block, closing: TokenType | None) -> None:
        while True:
            token = self.current
            if token.type is closing:
                self._take()
                return
            if token.type is TokenType.EOF:
                if closing is None:
                    return
                raise self._error(f"Expected '}}' to close '{block.type}' block")
            if token.type is not TokenType.IDENTIFIER:
                raise self._error(f"Expected directive or block, got {token.type.name}")
            self._parse_statement(block)

    def _parse_statement(self, parent: Block) -> None:
        name_token = self._take()
        values: list[Any] = []
        while self.current.type in VALUE_TOKENS:
            values.append(self._take().value)

        if self.current.type is TokenType.SEMICOLON:
            self._take()
            parent.directives.append(Directive(name_token.value, values, name_token.line))
            return

        if self.current.type is TokenType.LBRACE:
            if len(values) > 1:
                raise self._error(
                    f"Block '{name_token.value}' has too many arguments before '{{'"
                )
            self._take()
            block = Block(
                type=name_token.value,
                name=str(values[0]) if values else None,
                line=name_token.line,
            )
            self._parse_body(block, closing=TokenType.RBRACE)
            parent.blocks.append(block)
            return

        raise self._error(f"Expected '{{' or ';' after '{name_token.value}'")


def parse_config(source: str, filename: str = "<string>") -> ConfigDocument:
    """Parse configuration text."""
    return ConfigParser(source, filename).parse()


def parse_config_file(path: str | Path) -> ConfigDocument:
    """Parse a configuration file."""
    path = Path(path)
    return parse_config(path.read_text(), str(path))
