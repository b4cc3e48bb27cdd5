"""ABNF grammars used to parse EIP-4361 messages."""
