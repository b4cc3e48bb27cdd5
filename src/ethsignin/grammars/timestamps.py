"""Date-time ABNF definition.

Narrower than RFC 3339 on digit ranges so that it accepts exactly what the
ISO-8601 regex in :mod:`ethsignin.defs` accepts. Calendar validity (e.g. the
30th of February) is checked later by the model.
"""

from typing import ClassVar, List

from abnf.grammars.misc import load_grammar_rules
from abnf.parser import Rule as _Rule

from . import core


@load_grammar_rules([("DIGIT", core.Rule("DIGIT"))])
class Rule(_Rule):
    """Rules for ISO-8601 timestamps."""

    grammar: ClassVar[List] = [
        "date-fullyear = 4DIGIT",
        'date-month = "0" %x31-39 / "1" %x30-32',
        'date-mday = "0" %x31-39 / ( "1" / "2" ) DIGIT / "3" %x30-31',
        'time-hour = ( "0" / "1" ) DIGIT / "2" %x30-33',
        "time-minute = %x30-35 DIGIT",
        'time-second = %x30-35 DIGIT / "60"',
        'time-secfrac = "." 1*DIGIT',
        'time-numoffset = ( "+" / "-" ) time-hour ":" time-minute',
        'time-offset = "Z" / time-numoffset',
        'partial-time = time-hour ":" time-minute ":" time-second [ time-secfrac ]',
        'full-date = date-fullyear "-" date-month "-" date-mday',
        "full-time = partial-time time-offset",
        'date-time = full-date "T" full-time',
    ]
