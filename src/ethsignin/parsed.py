"""SIWE message parsers."""

import re
from typing import List, Optional

import abnf

from . import defs
from .errors import UnableToParse
from .grammars import eip4361

# (field, pattern) for the optional lines following `Nonce`, in order.
_OPTIONAL_LINES = [
    ("issued_at", "Issued At:", defs.ISSUED_AT_LINE),
    ("expiration_time", "Expiration Time:", defs.EXPIRATION_TIME_LINE),
    ("not_before", "Not Before:", defs.NOT_BEFORE_LINE),
    ("request_id", "Request ID:", defs.REQUEST_ID_LINE),
]


class _Lines:
    """Cursor over the lines of a message."""

    def __init__(self, message: str):
        self.lines = message.split("\n")
        self.index = 0

    def peek(self) -> Optional[str]:
        if self.index < len(self.lines):
            return self.lines[self.index]
        return None

    def expect(self, pattern: "re.Pattern", field: str) -> "re.Match":
        line = self.peek()
        match = pattern.fullmatch(line) if line is not None else None
        if match is None:
            raise UnableToParse(
                pattern.pattern,
                "end of message" if line is None else line,
                line=self.index + 1,
                field=field,
            )
        self.index += 1
        return match

    def expect_blank(self, after: str):
        line = self.peek()
        if line != "":
            raise UnableToParse(
                "an empty line",
                "end of message" if line is None else line,
                line=self.index + 1,
                field=after,
            )
        self.index += 1


class RegExpParsedMessage:
    """Regex parsed SIWE message, read one line at a time."""

    def __init__(self, message: str):
        """Parse a SIWE message.

        :raises UnableToParse: naming the first line that is missing, out of
        order or malformed.
        """
        lines = _Lines(message)

        self.domain = lines.expect(defs.HEADER_LINE, "domain").group("domain")
        self.address = lines.expect(defs.ADDRESS_LINE, "address").group("address")
        lines.expect_blank("address")

        if lines.peek() == "":
            lines.index += 1
        else:
            statement = lines.expect(defs.STATEMENT_LINE, "statement")
            self.statement = statement.group("statement")
            lines.expect_blank("statement")

        self.uri = lines.expect(defs.URI_LINE, "uri").group("uri")
        self.version = lines.expect(defs.VERSION_LINE, "version").group("version")
        self.chain_id = lines.expect(defs.CHAIN_ID_LINE, "chain_id").group("chain_id")
        self.nonce = lines.expect(defs.NONCE_LINE, "nonce").group("nonce")

        for field, key, pattern in _OPTIONAL_LINES:
            line = lines.peek()
            if line is not None and line.startswith(key):
                setattr(self, field, lines.expect(pattern, field).group(field))

        if lines.peek() is not None and lines.peek().startswith("Resources:"):
            lines.expect(defs.RESOURCES_LINE, "resources")
            resources: List[str] = []
            while lines.peek() is not None and lines.peek().startswith("- "):
                resources.append(
                    lines.expect(defs.RESOURCE_LINE, "resources").group("resource")
                )
            self.resources = resources

        if lines.peek() is not None:
            raise UnableToParse(
                "end of message",
                lines.peek(),
                line=lines.index + 1,
                field="resources",
            )


class ABNFParsedMessage:
    """ABNF parsed SIWE message."""

    def __init__(self, message: str):
        """Parse a SIWE message."""
        parser = eip4361.Rule("sign-in-with-ethereum")
        try:
            node = parser.parse_all(message)
        except abnf.ParseError as e:
            # Let the line parser point at the faulty line where it can.
            RegExpParsedMessage(message)
            raise UnableToParse("a message following the EIP-4361 grammar", str(e)) from e

        for child in node.children:
            if child.name in [
                "domain",
                "address",
                "statement",
                "uri",
                "version",
                "nonce",
                "chain-id",
                "issued-at",
                "expiration-time",
                "not-before",
                "request-id",
            ]:
                setattr(self, child.name.replace("-", "_"), child.value)

            if child.name == "resources":
                self.resources = [
                    r.value
                    for resource in child.children
                    for r in resource.children
                    if r.name == "uri"
                ]
