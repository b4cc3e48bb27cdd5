"""Top-level ABNF definition."""

from typing import ClassVar, List

from abnf.grammars import rfc3986
from abnf.grammars.misc import load_grammar_rules
from abnf.parser import Rule as _Rule

from . import core, timestamps


@load_grammar_rules(
    [
        ("URI", rfc3986.Rule("URI")),
        ("authority", rfc3986.Rule("authority")),
        ("reserved", rfc3986.Rule("reserved")),
        ("unreserved", rfc3986.Rule("unreserved")),
        ("pchar", rfc3986.Rule("pchar")),
        ("LF", core.Rule("LF")),
        ("HEXDIG", core.Rule("HEXDIG")),
        ("ALPHA", core.Rule("ALPHA")),
        ("DIGIT", core.Rule("DIGIT")),
        ("date-time", timestamps.Rule("date-time")),
    ]
)
class Rule(_Rule):
    """Rules from EIP-4361, with an optional `Issued At` line."""

    grammar: ClassVar[List] = [
        'sign-in-with-ethereum = domain %s" wants you to sign in with your Ethereum '
        'account:" LF address LF LF [ statement LF ] LF '
        '%s"URI: " uri LF '
        '%s"Version: " version LF '
        '%s"Chain ID: " chain-id LF '
        '%s"Nonce: " nonce '
        '[ LF %s"Issued At: " issued-at ] '
        '[ LF %s"Expiration Time: " expiration-time ] '
        '[ LF %s"Not Before: " not-before ] '
        '[ LF %s"Request ID: " request-id ] '
        '[ LF %s"Resources:" resources ]',
        "domain = authority",
        'address = "0x" 40HEXDIG',
        'statement = 1*( reserved / unreserved / " " )',
        "uri = URI",
        'version = "1"',
        "chain-id = 1*DIGIT",
        "nonce = 8*( ALPHA / DIGIT )",
        "issued-at = date-time",
        "expiration-time = date-time",
        "not-before = date-time",
        "request-id = *pchar",
        "resources = *( LF resource )",
        'resource = "- " uri',
    ]
