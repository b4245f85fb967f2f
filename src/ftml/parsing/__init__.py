"""Tree-building support for the FTML parser.

Provides:
- contexts: Context enum, Frame and ContextStack for the pushdown parser
"""

from ftml.parsing.contexts import Context, ContextStack, Frame

__all__ = ["Context", "ContextStack", "Frame"]
