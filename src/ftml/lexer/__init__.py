"""Token scanner for FTML markup.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, scan, decode_source
└── core.py              # Lexer class, tag and attribute syntax

Usage:
    >>> from ftml.lexer import Lexer
    >>> for token in Lexer("<p>Hi</p>").tokenize():
    ...     print(token)
Token(START_TAG, <p>, 1:1)
Token(TEXT, 'Hi', 1:4)
Token(END_TAG, </p>, 1:6)
Token(EOF, 1:10)

"""

from ftml.lexer.core import Lexer, decode_source, scan

__all__ = ["Lexer", "decode_source", "scan"]
