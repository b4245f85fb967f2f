"""DocumentRenderer protocol: stable interface for FTML renderers.

Any renderer that implements ``render(document) -> str`` conforms to this
protocol. Both built-in renderers do: ``CanonicalWriter`` produces markup,
``TerminalRenderer`` produces fixed-width text.

Example:
    from ftml.renderers.protocol import DocumentRenderer

    def show(renderer: DocumentRenderer, doc: Document) -> None:
        print(renderer.render(doc), end="")

"""

from typing import Protocol

from ftml.nodes import Document


class DocumentRenderer(Protocol):
    """Protocol for document renderers.

    Implementations must accept a Document and return a rendered string
    without modifying the Document.

    """

    def render(self, document: Document) -> str:
        """Render a Document to a string.

        Args:
            document: The document to render.

        Returns:
            Rendered string output.

        """
        ...
