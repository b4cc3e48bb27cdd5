import pytest

from ethsignin import UnableToParse
from ethsignin.parsed import ABNFParsedMessage, RegExpParsedMessage

HEADER = "service.org wants you to sign in with your Ethereum account:"
ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
BODY = [
    "URI: https://service.org/login",
    "Version: 1",
    "Chain ID: 1",
    "Nonce: 32891757",
]


def message(*lines):
    return "\n".join(lines)


class TestRegExpParsedMessage:
    def test_minimal_message(self):
        parsed = RegExpParsedMessage(message(HEADER, ADDRESS, "", "", *BODY))
        assert parsed.domain == "service.org"
        assert parsed.address == ADDRESS
        assert parsed.chain_id == "1"
        assert parsed.nonce == "32891757"
        assert not hasattr(parsed, "statement")
        assert not hasattr(parsed, "issued_at")

    def test_all_optional_lines(self):
        parsed = RegExpParsedMessage(
            message(
                HEADER,
                ADDRESS,
                "",
                "Sign in.",
                "",
                *BODY,
                "Issued At: 2021-09-30T16:25:24Z",
                "Expiration Time: 2021-10-30T16:25:24Z",
                "Not Before: 2021-09-30T16:25:24Z",
                "Request ID: abc",
                "Resources:",
                "- https://example.com/a",
                "- https://example.com/b",
            )
        )
        assert parsed.statement == "Sign in."
        assert parsed.expiration_time == "2021-10-30T16:25:24Z"
        assert parsed.request_id == "abc"
        assert parsed.resources == ["https://example.com/a", "https://example.com/b"]

    @pytest.mark.parametrize(
        "lines,line,field",
        [
            (["", ADDRESS, "", "", *BODY], 1, "domain"),
            ([HEADER, "0x1234", "", "", *BODY], 2, "address"),
            ([HEADER, ADDRESS, "", "", BODY[1], BODY[0], *BODY[2:]], 5, "uri"),
            ([HEADER, ADDRESS, "", "", *BODY[:2], BODY[3], BODY[2]], 7, "chain_id"),
            ([HEADER, ADDRESS, "", "", *BODY[:3]], 8, "nonce"),
            ([HEADER, ADDRESS, "", *BODY], 5, "statement"),
            ([HEADER, ADDRESS, "", "", *BODY, "Issued At: yesterday"], 9, "issued_at"),
            (
                [
                    HEADER,
                    ADDRESS,
                    "",
                    "",
                    *BODY,
                    "Request ID: abc",
                    "Not Before: 2021-09-30T16:25:24Z",
                ],
                10,
                "resources",
            ),
            ([HEADER, ADDRESS, "", "", *BODY, ""], 9, "resources"),
        ],
    )
    def test_reports_failing_line(self, lines, line, field):
        with pytest.raises(UnableToParse) as e:
            RegExpParsedMessage(message(*lines))
        assert e.value.line == line
        assert e.value.field == field
        assert f"line {line}" in str(e.value)


class TestABNFParsedMessage:
    def test_minimal_message(self):
        parsed = ABNFParsedMessage(message(HEADER, ADDRESS, "", "", *BODY))
        assert parsed.domain == "service.org"
        assert parsed.chain_id == "1"

    def test_points_at_failing_line(self):
        with pytest.raises(UnableToParse) as e:
            ABNFParsedMessage(message(HEADER, ADDRESS, "", "", *BODY[:3]))
        assert e.value.line == 8
        assert e.value.field == "nonce"

    def test_grammar_only_failure(self):
        # A space is not allowed in a URI by RFC 3986 but passes the line regex
        # when it sits in the fragment.
        with pytest.raises(UnableToParse) as e:
            ABNFParsedMessage(
                message(
                    HEADER,
                    ADDRESS,
                    "",
                    "",
                    "URI: https://service.org/login#a b",
                    *BODY[1:],
                )
            )
        assert e.value.line is None
        assert e.value.__cause__ is not None
