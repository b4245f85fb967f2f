"""Tests for the error hierarchy and error formatting."""

import pytest

from ftml import parse
from ftml.errors import (
    FtmlError,
    InvariantError,
    LexError,
    MissingRequiredAttributeError,
    ParseError,
    RenderError,
    StructureError,
    UnbalancedTagError,
    UnknownTagError,
)
from ftml.location import SourceLocation


class TestHierarchy:
    """Every FTML error is an FtmlError."""

    @pytest.mark.parametrize(
        "error_class",
        [
            LexError,
            UnknownTagError,
            UnbalancedTagError,
            StructureError,
            MissingRequiredAttributeError,
        ],
    )
    def test_parse_errors(self, error_class: type) -> None:
        assert issubclass(error_class, ParseError)
        assert issubclass(error_class, FtmlError)

    def test_value_errors(self) -> None:
        assert issubclass(InvariantError, ValueError)
        assert issubclass(RenderError, ValueError)
        assert not issubclass(ParseError, ValueError)


class TestFormatting:
    """str(error) is ``location message``."""

    def test_with_location(self) -> None:
        error = ParseError("bad", SourceLocation(2, 5, 9))
        assert str(error) == "2:5 bad"
        assert error.position == (2, 5)
        assert error.offset == 9

    def test_with_source_file(self) -> None:
        error = LexError("bad", SourceLocation(1, 1, 0, "memo.ftml"))
        assert str(error) == "memo.ftml:1:1 bad"
        assert error.source_file == "memo.ftml"

    def test_without_location(self) -> None:
        error = ParseError("bad")
        assert str(error) == "bad"
        assert error.position is None
        assert error.lineno is None

    def test_unknown_tag(self) -> None:
        error = UnknownTagError("div")
        assert error.tag == "div"
        assert str(error) == "Unknown tag <div>"

    def test_unbalanced_messages(self) -> None:
        assert str(UnbalancedTagError("b", "i")) == "Expected </b>, found </i>"
        assert "no element is open" in str(UnbalancedTagError(None, "p"))
        assert "end of input" in str(UnbalancedTagError("p", None))

    def test_unbalanced_custom_message(self) -> None:
        error = UnbalancedTagError("br", "br", message="Self-closing <br/> is not allowed")
        assert error.message == "Self-closing <br/> is not allowed"
        assert error.expected == "br"

    def test_structure_error(self) -> None:
        error = StructureError("li", "<ul> or <ol>")
        assert str(error) == "<li> is only allowed inside <ul> or <ol>"
        assert error.expected_context == "<ul> or <ol>"

    def test_missing_attribute(self) -> None:
        error = MissingRequiredAttributeError("a", "href")
        assert str(error) == "<a> requires the 'href' attribute"


class TestRaisedErrors:
    """Errors raised by parse carry the offending location."""

    def test_unknown_tag_location(self) -> None:
        with pytest.raises(UnknownTagError) as exc_info:
            parse("<p>\n  <div>x</div></p>", source_file="memo.ftml")
        assert exc_info.value.position == (2, 3)
        assert str(exc_info.value).startswith("memo.ftml:2:3 ")

    def test_byte_offset(self) -> None:
        with pytest.raises(UnknownTagError) as exc_info:
            parse("<p>é<span>x</span></p>")
        assert exc_info.value.position == (1, 5)
        assert exc_info.value.offset == 5

    def test_catch_all(self) -> None:
        with pytest.raises(FtmlError):
            parse("<p>x")
