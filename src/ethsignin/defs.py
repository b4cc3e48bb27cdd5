"""Regexes for the various fields."""

import re

DATETIME = (
    "(?P<date>(?P<year>[0-9]{4})-(?P<month>0[1-9]|1[012])-"
    "(?P<day>0[1-9]|[12][0-9]|3[01]))[Tt]"
    "(?P<hour>[01][0-9]|2[0-3]):(?P<minute>[0-5][0-9]):(?P<second>[0-5][0-9]|60)"
    "(\\.(?P<fraction>[0-9]+))?"
    "(?P<offset>[Zz]|(?P<sign>[+-])(?P<offset_hour>[01][0-9]|2[0-3]):"
    "(?P<offset_minute>[0-5][0-9]))"
)
ISO8601 = re.compile(DATETIME)

ADDRESS_HEX = re.compile("0x[a-fA-F0-9]{40}")
NONCE_CHARS = re.compile("[a-zA-Z0-9]{8,}")
INTEGER = re.compile("[0-9]+")

# Single-line patterns, consumed in this order by the line parser.
HEADER_SUFFIX = " wants you to sign in with your Ethereum account:"
HEADER_LINE = re.compile(f"(?P<domain>[^/?#]+){HEADER_SUFFIX}")
ADDRESS_LINE = re.compile("(?P<address>0x[a-zA-Z0-9]{40})")
STATEMENT_LINE = re.compile("(?P<statement>[^\\n]+)")
URI = "(([^ :/?#]+):)?(//([^ /?#]*))?([^ ?#]*)(\\?([^ #]*))?(#(.*))?"
URI_LINE = re.compile(f"URI: (?P<uri>{URI})")
VERSION_LINE = re.compile("Version: (?P<version>1)")
CHAIN_ID_LINE = re.compile("Chain ID: (?P<chain_id>[0-9]+)")
NONCE_LINE = re.compile("Nonce: (?P<nonce>[a-zA-Z0-9]{8,})")
ISSUED_AT_LINE = re.compile(f"Issued At: (?P<issued_at>{DATETIME})")
EXPIRATION_TIME_LINE = re.compile(f"Expiration Time: (?P<expiration_time>{DATETIME})")
NOT_BEFORE_LINE = re.compile(f"Not Before: (?P<not_before>{DATETIME})")
REQUEST_ID_LINE = re.compile("Request ID: (?P<request_id>[-._~!$&'()*+,;=:@%a-zA-Z0-9]*)")
RESOURCES_LINE = re.compile("Resources:")
RESOURCE_LINE = re.compile(f"- (?P<resource>{URI})")
