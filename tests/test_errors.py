# =============================================================================
# test_errors.py - Error Formatting Tests
# =============================================================================
# Tests for the exception hierarchy and message formatting, and for the
# CLI exit code mapping.
# =============================================================================

import click
import pytest

from brisc_asm.cli.errors import ExitCode, handle_cli_exception
from brisc_asm.errors import (
    AssemblerError,
    BriscError,
    DuplicateLabelError,
    EncodingRangeError,
    LexError,
    ParseError,
    ProgramSizeError,
    SourceLocation,
    UnresolvedLabelError,
)


class TestHierarchy:
    """Test exception inheritance."""

    @pytest.mark.parametrize("error_type", [
        LexError,
        ParseError,
        DuplicateLabelError,
        UnresolvedLabelError,
        EncodingRangeError,
        ProgramSizeError,
    ])
    def test_assembler_errors(self, error_type):
        assert issubclass(error_type, AssemblerError)
        assert issubclass(error_type, BriscError)

    def test_program_size_is_range_error(self):
        assert issubclass(ProgramSizeError, EncodingRangeError)


class TestFormatting:
    """Test message layout."""

    def test_location_prefix(self):
        error = ParseError("bad thing", SourceLocation("a.basm", 3, 7))
        assert str(error) == "a.basm:3:7: error: bad thing"
        assert error.line == 3

    def test_without_location(self):
        error = AssemblerError("no place")
        assert str(error) == "error: no place"
        assert error.line is None

    def test_source_line_and_hint(self):
        error = ParseError(
            "unknown mnemonic 'ad'",
            SourceLocation("a.basm", 1, 3),
            hint="did you mean 'add'?",
            source_line="  ad r0, r1",
        )
        assert str(error).splitlines() == [
            "a.basm:1:3: error: unknown mnemonic 'ad'",
            "      ad r0, r1",
            "      ^",
            "hint: did you mean 'add'?",
        ]

    def test_lex_error_default_message(self):
        error = LexError("$5", SourceLocation("<input>", 1, 9))
        assert error.message == "invalid token '$5'"
        assert error.text == "$5"

    def test_unresolved_hint(self):
        error = UnresolvedLabelError("lop", similar_labels=["loop", "loops"])
        assert error.hint == "did you mean 'loop', 'loops'?"

    def test_unresolved_without_suggestions(self):
        assert UnresolvedLabelError("x").hint is None

    def test_duplicate_hint(self):
        error = DuplicateLabelError(
            "x",
            SourceLocation("f", 5, 1),
            original_location=SourceLocation("f", 2, 1),
        )
        assert error.hint == "'x' was first declared at f:2:1"

    def test_program_size_message(self):
        error = ProgramSizeError(40, 32)
        assert error.message == "program has 40 instructions, maximum is 32"
        assert error.line is None


class TestExitCodes:
    """Test mapping exceptions to CLI exit codes."""

    @pytest.mark.parametrize("error,code", [
        (ParseError("x"), ExitCode.BUILD_ERROR),
        (BriscError("x"), ExitCode.BUILD_ERROR),
        (click.BadParameter("x"), ExitCode.INVALID_ARGS),
        (FileNotFoundError("x"), ExitCode.INVALID_ARGS),
        (PermissionError("x"), ExitCode.INVALID_ARGS),
        (UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
         ExitCode.INVALID_ARGS),
        (RuntimeError("x"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_code(self, error, code, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)
        assert exc_info.value.code == code
        assert capsys.readouterr().err
