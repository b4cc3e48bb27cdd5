"""RFC 5234 core rules needed by the other grammars."""

from typing import ClassVar, List

from abnf.grammars.misc import load_grammar_rules
from abnf.parser import Rule as _Rule


@load_grammar_rules()
class Rule(_Rule):
    """Core rules from RFC 5234 appendix B.1."""

    grammar: ClassVar[List] = [
        "ALPHA = %x41-5A / %x61-7A",
        "DIGIT = %x30-39",
        'HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"',
        "LF = %x0A",
    ]
