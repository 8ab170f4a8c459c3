"""Credential redaction for datasource blocks in schema files.

The schema is tokenized rather than matched with one big regex, so every
URL value ends up in exactly one of three buckets (literal, env reference,
unrecognized) and the fail-open path is easy to follow.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

REDACTED_PLACEHOLDER = "<REDACTED>"

# Keys inside a datasource block that hold connection strings
DEFAULT_URL_KEYS = ("url", "directUrl", "shadowDatabaseUrl")

# A "//" right after ":" or "/" belongs to a URL (scheme://, file:///), not a comment
_TOKEN_RE = re.compile(
    r"""
    (?P<comment>(?<![:/])//[^\n]*)
    |(?P<string>"(?:[^"\\\n]|\\[^\n])*")
    |(?P<newline>\r?\n)
    |(?P<space>[ \t\f\v]+)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<lbrace>\{)
    |(?P<rbrace>\})
    |(?P<lparen>\()
    |(?P<rparen>\))
    |(?P<equals>=)
    |(?P<other>.)
    """,
    re.VERBOSE,
)

_TRIVIA = frozenset({"space", "comment"})

# Tokens after which ``<ident> =`` opens a new statement on the same line
_STATEMENT_BREAKS = frozenset({"space", "string", "rparen"})


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start: int
    end: int


def tokenize(text: str) -> List[Token]:
    """Split text into tokens. Concatenating token texts gives back the input."""
    return [
        Token(kind=m.lastgroup or "other", text=m.group(), start=m.start(), end=m.end())
        for m in _TOKEN_RE.finditer(text)
    ]


def looks_like_credential_url(value: str) -> bool:
    """Heuristic for strings that may embed credentials (``scheme://user:pw@host``)."""
    return "://" in value and "@" in value


# ---------------------------------------------------------------------------
# URL value variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralUrl:
    """A quoted connection string written directly in the schema."""

    value: str


@dataclass(frozen=True)
class EnvRef:
    """``env("NAME")``: the connection string is supplied at runtime."""

    name: str


@dataclass(frozen=True)
class UnrecognizedValue:
    """Anything else assigned to a URL key."""

    raw: str


UrlValue = Union[LiteralUrl, EnvRef, UnrecognizedValue]


@dataclass(frozen=True)
class UrlAssignment:
    """A ``<key> = <value>`` statement for one of the URL keys.

    ``start``/``end`` delimit the value in the original text.
    """

    key: str
    value: UrlValue
    start: int
    end: int


@dataclass
class DatasourceBlock:
    """A ``datasource <name> { ... }`` block found in the text."""

    name: str
    start: int
    end: int
    closed: bool = True
    assignments: List[UrlAssignment] = field(default_factory=list)


def _unquote(literal: str) -> str:
    return literal[1:-1]


def classify_value(tokens: Sequence[Token]) -> UrlValue:
    """Classify the significant tokens on the right-hand side of an assignment."""
    kinds = [t.kind for t in tokens]
    if kinds == ["string"]:
        return LiteralUrl(value=_unquote(tokens[0].text))
    if (
        kinds == ["ident", "lparen", "string", "rparen"]
        and tokens[0].text == "env"
    ):
        return EnvRef(name=_unquote(tokens[2].text))
    return UnrecognizedValue(raw="".join(t.text for t in tokens))


class SchemaRedactor:
    """Strips credentials from datasource URLs in schema text.

    Only values of URL keys inside ``datasource`` blocks are touched:
    - string literals are replaced with the placeholder literal
    - ``env("...")`` references are kept
    - any other value is kept unless it looks like a credential URL

    Malformed blocks (no closing brace) are skipped and never raise.

    Example:
        redactor = SchemaRedactor()
        redactor.redact('datasource db { url = "postgresql://u:pw@h/db" }')
        # 'datasource db { url = "<REDACTED>" }'
    """

    def __init__(
        self,
        placeholder: str = REDACTED_PLACEHOLDER,
        url_keys: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the redactor.

        Args:
            placeholder: Text placed between the quotes of a redacted value
            url_keys: Datasource keys holding connection strings
        """
        if '"' in placeholder or "\\" in placeholder or "\n" in placeholder:
            raise ValueError("Placeholder must be usable inside a string literal")
        self.placeholder = placeholder
        self.url_keys = tuple(url_keys) if url_keys else DEFAULT_URL_KEYS

    @property
    def replacement(self) -> str:
        return f'"{self.placeholder}"'

    def redact(self, text: str) -> str:
        """
        Redact credentials from every datasource block in ``text``.

        Args:
            text: Schema text

        Returns:
            The text with targeted substitutions applied, otherwise unchanged
        """
        if not text:
            return text

        substitutions: List[Tuple[int, int]] = []
        for block in self.find_datasources(text):
            if not block.closed:
                logger.debug(
                    "Datasource block %r has no closing brace, left unredacted",
                    block.name,
                )
                continue
            for assignment in block.assignments:
                if self._should_redact(assignment.value):
                    substitutions.append((assignment.start, assignment.end))
                elif isinstance(assignment.value, UnrecognizedValue):
                    logger.debug(
                        "Unrecognized %s value in datasource %r, left unredacted",
                        assignment.key,
                        block.name,
                    )

        if not substitutions:
            return text

        # Replace from the end so earlier offsets stay valid
        redacted = text
        for start, end in sorted(substitutions, reverse=True):
            redacted = redacted[:start] + self.replacement + redacted[end:]
        return redacted

    def _should_redact(self, value: UrlValue) -> bool:
        if isinstance(value, LiteralUrl):
            return True
        if isinstance(value, UnrecognizedValue):
            return looks_like_credential_url(value.raw)
        return False

    def find_datasources(self, text: str) -> List[DatasourceBlock]:
        """Return every datasource block in ``text`` with its URL assignments."""
        tokens = tokenize(text)
        return list(self._iter_blocks(tokens, len(text)))

    def _iter_blocks(
        self, tokens: List[Token], text_length: int
    ) -> Iterator[DatasourceBlock]:
        # Top-level blocks never nest, so a header is honored at any depth and
        # an unclosed block elsewhere cannot hide a datasource.
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.kind == "ident" and token.text == "datasource":
                header = self._match_header(tokens, i)
                if header is not None:
                    name, body_start = header
                    block, resume = self._parse_block(
                        tokens, i, name, body_start, text_length
                    )
                    yield block
                    i = resume
                    continue
            i += 1

    @staticmethod
    def _next_significant(tokens: List[Token], i: int) -> int:
        while i < len(tokens) and tokens[i].kind in _TRIVIA:
            i += 1
        return i

    def _match_header(self, tokens: List[Token], i: int) -> Optional[Tuple[str, int]]:
        """Match ``datasource <name> {`` at ``i``; returns the name and the index after ``{``."""
        j = self._next_significant(tokens, i + 1)
        if j >= len(tokens) or tokens[j].kind != "ident":
            return None
        name = tokens[j].text
        k = self._next_significant(tokens, j + 1)
        if k >= len(tokens) or tokens[k].kind != "lbrace":
            return None
        return name, k + 1

    def _parse_block(
        self,
        tokens: List[Token],
        header_index: int,
        name: str,
        body_start: int,
        text_length: int,
    ) -> Tuple[DatasourceBlock, int]:
        """Collect URL assignments up to the matching ``}``.

        Returns the block and the token index where scanning continues.
        """
        start = tokens[header_index].start
        depth = 1
        line: List[Token] = []
        line_depth: Optional[int] = None
        assignments: List[UrlAssignment] = []

        i = body_start
        while i < len(tokens):
            token = tokens[i]
            if token.kind == "rbrace" and depth == 1:
                if line_depth == 1:
                    self._collect_assignments(line, assignments)
                block = DatasourceBlock(
                    name=name,
                    start=start,
                    end=token.end,
                    closed=True,
                    assignments=assignments,
                )
                return block, i + 1

            if token.kind == "newline":
                # Statements nested in inner braces are not datasource fields
                if line_depth == 1:
                    self._collect_assignments(line, assignments)
                line = []
                line_depth = None
            else:
                if line_depth is None and token.kind not in _TRIVIA:
                    line_depth = depth
                line.append(token)

            if token.kind == "lbrace":
                depth += 1
            elif token.kind == "rbrace":
                depth -= 1
            i += 1

        # Unclosed: report it and resume right after the header
        block = DatasourceBlock(name=name, start=start, end=text_length, closed=False)
        return block, body_start

    def _collect_assignments(
        self, line: List[Token], assignments: List[UrlAssignment]
    ) -> None:
        """Collect URL assignments from one line, which may hold several statements."""
        significant = [n for n, t in enumerate(line) if t.kind not in _TRIVIA]
        starts = [
            pos
            for pos in range(len(significant) - 1)
            if self._starts_statement(line, significant, pos)
        ]
        for number, pos in enumerate(starts):
            key = line[significant[pos]]
            stop = starts[number + 1] if number + 1 < len(starts) else len(significant)
            value_indices = significant[pos + 2 : stop]
            if key.text not in self.url_keys or not value_indices:
                continue

            first, last = value_indices[0], value_indices[-1]
            value = classify_value([line[n] for n in value_indices])
            if isinstance(value, UnrecognizedValue):
                # Source text of the value, inner spacing included
                value = UnrecognizedValue(
                    raw="".join(t.text for t in line[first : last + 1])
                )
            assignments.append(
                UrlAssignment(
                    key=key.text,
                    value=value,
                    start=line[first].start,
                    end=line[last].end,
                )
            )

    @staticmethod
    def _starts_statement(line: List[Token], significant: List[int], pos: int) -> bool:
        index = significant[pos]
        if line[index].kind != "ident":
            return False
        if line[significant[pos + 1]].kind != "equals":
            return False
        return index == 0 or line[index - 1].kind in _STATEMENT_BREAKS


_default_redactor = SchemaRedactor()


def redact_schema(text: str) -> str:
    """One-liner redaction with the default placeholder and URL keys."""
    return _default_redactor.redact(text)
