# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the BRISC assembler parser.
#
# Test coverage includes:
#   - Operand count and kind checking for every mnemonic
#   - Register bounds
#   - Label declarations and address assignment
#   - Forward and backward references
#   - Symbolic source/sink names for in/out
#   - Error conditions and messages
# =============================================================================

import pytest
from brisc_asm.assembler.parser import Parser, Program, parse_source
from brisc_asm.config import AssemblerConfig
from brisc_asm.cpu import Opcode, OperandKind
from brisc_asm.errors import (
    DuplicateLabelError,
    LexError,
    ParseError,
    UnresolvedLabelError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def parse(source: str):
    """Parse source and return (program, symbols)."""
    return parse_source(source, "<test>")


def parse_one(line: str):
    """Parse a single-instruction source and return the instruction."""
    program, _ = parse(line)
    assert len(program) == 1
    return program.instructions[0]


def operand_values(inst) -> list:
    return [op.value for op in inst.operands]


# =============================================================================
# Instruction Tests
# =============================================================================

class TestInstructions:
    """Test parsing of each instruction shape."""

    @pytest.mark.parametrize("mnemonic", ["add", "sub", "and", "or", "xor", "sr", "sl"])
    def test_register_register(self, mnemonic):
        inst = parse_one(f"{mnemonic} r1, r2")
        assert inst.mnemonic == mnemonic
        assert [op.kind for op in inst.operands] == [OperandKind.REGISTER] * 2
        assert operand_values(inst) == [1, 2]

    def test_inv(self):
        inst = parse_one("inv r4")
        assert inst.opcode == Opcode.INV
        assert operand_values(inst) == [4]

    def test_ldi(self):
        inst = parse_one("ldi r3, -5")
        assert inst.opcode == Opcode.LDI
        assert inst.operands[1].kind == OperandKind.IMMEDIATE
        assert operand_values(inst) == [3, -5]

    def test_nop(self):
        inst = parse_one("nop")
        assert inst.opcode == Opcode.NOP
        assert inst.operands == ()

    def test_jz_literal_target(self):
        inst = parse_one("jz r0, 7")
        assert inst.operands[1].kind == OperandKind.IMMEDIATE
        assert operand_values(inst) == [0, 7]

    def test_j_label_target(self):
        program, _ = parse("top: j top")
        inst = program.instructions[0]
        assert inst.operands[0].kind == OperandKind.LABEL
        assert inst.operands[0].value == "top"

    def test_in_numeric(self):
        inst = parse_one("in r2, 6")
        assert operand_values(inst) == [2, 6]

    def test_instruction_text_strips_comment(self):
        inst = parse_one("  add r0, r1   ; sum")
        assert inst.text == "add r0, r1"
        assert inst.source_line == "  add r0, r1   ; sum"

    def test_str(self):
        assert str(parse_one("jlt r5, 3")) == "jlt r5, 3"

    def test_location_points_at_mnemonic(self):
        program, _ = parse("\n\n   sub r1, r2")
        inst = program.instructions[0]
        assert inst.location.line == 3
        assert inst.location.column == 4


# =============================================================================
# Device Alias Tests
# =============================================================================

class TestDeviceAliases:
    """Test symbolic source/sink names."""

    @pytest.mark.parametrize("alias,value", [
        ("SW", 0),
        ("SWITCHES", 0),
        ("BTNC", 1),
        ("BTNU", 2),
        ("BTNL", 3),
        ("BTNR", 4),
        ("BTND", 5),
        ("COUNTER", 6),
    ])
    def test_sources(self, alias, value):
        inst = parse_one(f"in r1, {alias}")
        assert inst.operands[1].kind == OperandKind.IMMEDIATE
        assert inst.operands[1].value == value

    @pytest.mark.parametrize("alias,value", [("SEG_RIGHT", 0), ("SEG_LEFT", 1)])
    def test_sinks(self, alias, value):
        inst = parse_one(f"out r1, {alias}")
        assert inst.operands[1].value == value

    def test_sink_name_not_a_source(self):
        with pytest.raises(ParseError, match="unknown source 'SEG_LEFT'"):
            parse("in r0, SEG_LEFT")

    def test_unknown_sink(self):
        with pytest.raises(ParseError, match="unknown sink 'LED'") as exc_info:
            parse("out r0, LED")
        assert "SEG_RIGHT" in str(exc_info.value)

    def test_alias_only_in_device_position(self):
        with pytest.raises(ParseError, match="operand 1 of .in. must be register"):
            parse("in SW, 1")

    def test_alias_is_not_a_label(self):
        """A label with an alias's name does not change in/out operands."""
        program, _ = parse("SW: in r0, SW")
        assert program.instructions[0].operands[1].value == 0


# =============================================================================
# Register Tests
# =============================================================================

class TestRegisters:
    """Test register bounds."""

    def test_highest_register_accepted(self):
        assert operand_values(parse_one("add r15, r0")) == [15, 0]

    def test_register_out_of_range(self):
        with pytest.raises(ParseError, match="register 'r16' out of range") as exc_info:
            parse("nop\nadd r0, r16")
        assert exc_info.value.line == 2

    def test_register_where_immediate_expected(self):
        with pytest.raises(ParseError, match="must be immediate"):
            parse("ldi r0, r1")

    def test_immediate_where_register_expected(self):
        with pytest.raises(ParseError, match="operand 2 of 'add' must be register"):
            parse("add r0, 5")


# =============================================================================
# Operand Count and Syntax Tests
# =============================================================================

class TestOperandSyntax:
    """Test arity and separator checking."""

    def test_missing_operand(self):
        with pytest.raises(ParseError, match="'add' expects 2 operands, found 1"):
            parse("add r0")

    def test_missing_all_operands(self):
        with pytest.raises(ParseError, match="'inv' expects 1 operand, found 0"):
            parse("inv")

    def test_extra_operand(self):
        with pytest.raises(ParseError, match="'inv' takes 1 operand"):
            parse("inv r0, r1")

    def test_nop_takes_no_operands(self):
        with pytest.raises(ParseError, match="'nop' takes 0 operands"):
            parse("nop r0")

    def test_missing_comma(self):
        with pytest.raises(ParseError, match="expected ','"):
            parse("add r0 r1")

    def test_double_comma(self):
        with pytest.raises(ParseError, match="expected an operand"):
            parse("add r0,, r1")

    def test_trailing_comma(self):
        with pytest.raises(ParseError, match="trailing ','"):
            parse("add r0, r1,")

    def test_leading_comma(self):
        with pytest.raises(ParseError, match="expected an operand"):
            parse("j , 3")

    def test_label_not_allowed_for_ldi(self):
        with pytest.raises(ParseError, match="operand 2 of 'ldi' must be immediate"):
            parse("x: ldi r0, x")

    def test_line_starting_with_operand(self):
        with pytest.raises(ParseError, match="expected an instruction"):
            parse("r0, r1")

    def test_label_declaration_after_mnemonic(self):
        with pytest.raises(ParseError, match="must start the line"):
            parse("j loop:")


# =============================================================================
# Mnemonic Tests
# =============================================================================

class TestMnemonics:
    """Test mnemonic lookup."""

    def test_unknown_mnemonic(self):
        with pytest.raises(ParseError, match="unknown mnemonic 'mov'"):
            parse("mov r0, r1")

    def test_unknown_mnemonic_suggestion(self):
        with pytest.raises(ParseError) as exc_info:
            parse("ld r0, 1")
        assert "did you mean" in str(exc_info.value)
        assert "'ldi'" in str(exc_info.value)

    def test_mnemonics_are_lowercase(self):
        with pytest.raises(ParseError, match="unknown mnemonic 'ADD'") as exc_info:
            parse("ADD r0, r1")
        assert "'add'" in str(exc_info.value)


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label declaration and address assignment."""

    def test_label_binds_to_next_instruction(self):
        program, symbols = parse("ldi r0, 0\nloop:\nldi r1, 1")
        assert symbols.resolve("loop") == 1
        assert program.labels[0].name == "loop"
        assert program.labels[0].address == 1

    def test_label_on_instruction_line(self):
        _, symbols = parse("nop\nhere: nop")
        assert symbols.resolve("here") == 1

    def test_several_labels_same_address(self):
        _, symbols = parse("a:\nb: c: nop")
        assert symbols.as_dict() == {"a": 0, "b": 0, "c": 0}

    def test_blank_and_comment_lines_do_not_advance(self):
        _, symbols = parse("nop\n\n; comment\n   \nmark:\nnop")
        assert symbols.resolve("mark") == 1

    def test_trailing_label(self):
        program, symbols = parse("nop\nnop\nend:")
        assert symbols.resolve("end") == 2
        assert program.end_address == 2

    def test_duplicate_label(self):
        with pytest.raises(DuplicateLabelError) as exc_info:
            parse("x: nop\nnop\nx: nop")
        assert exc_info.value.line == 3
        assert exc_info.value.original_location.line == 1

    def test_duplicate_label_same_line(self):
        with pytest.raises(DuplicateLabelError):
            parse("x: x: nop")

    def test_register_shaped_label(self):
        with pytest.raises(ParseError, match="collides with a register"):
            parse("r3: nop")

    def test_invalid_label_is_lex_error(self):
        with pytest.raises(LexError):
            parse("1st: nop")


# =============================================================================
# Reference Resolution Tests
# =============================================================================

class TestReferences:
    """Test label references and resolution."""

    def test_forward_and_backward_same_address(self):
        source = "\n".join([
            "jz r0, target",
            "nop",
            "target: nop",
            "j target",
        ])
        program, symbols = parse(source)
        resolved = program.resolve(symbols)
        assert resolved.instructions[0].operands[1].value == 2
        assert resolved.instructions[3].operands[0].value == 2

    def test_resolve_replaces_label_kind(self):
        program, symbols = parse("top: j top")
        assert not program.is_resolved
        resolved = program.resolve(symbols)
        assert resolved.is_resolved
        assert resolved.instructions[0].operands[0].kind == OperandKind.IMMEDIATE

    def test_resolve_does_not_modify_original(self):
        program, symbols = parse("top: j top")
        program.resolve(symbols)
        assert program.instructions[0].operands[0].kind == OperandKind.LABEL

    def test_undefined_label(self):
        with pytest.raises(UnresolvedLabelError) as exc_info:
            parse("nop\nj nowhere")
        assert exc_info.value.label == "nowhere"
        assert exc_info.value.line == 2

    def test_first_undefined_in_program_order(self):
        with pytest.raises(UnresolvedLabelError) as exc_info:
            parse("j first\njz r0, second")
        assert exc_info.value.label == "first"

    def test_undefined_label_suggestion(self):
        with pytest.raises(UnresolvedLabelError) as exc_info:
            parse("loop: nop\nj lop")
        assert exc_info.value.similar_labels == ["loop"]

    def test_references_listed_in_order(self):
        program, _ = parse("a: jz r0, b\nb: j a")
        assert [op.value for _, op in program.references()] == ["b", "a"]


# =============================================================================
# Parser State Tests
# =============================================================================

class TestParserState:
    """Test that runs are independent."""

    def test_reuse_parser(self):
        parser = Parser("<test>")
        parser.parse(["x: nop"])
        program, symbols = parser.parse(["x: nop", "nop"])
        assert len(program) == 2
        assert symbols.as_dict() == {"x": 0}

    def test_parse_accepts_any_iterable(self):
        parser = Parser("<test>", AssemblerConfig())
        program, _ = parser.parse(iter(["nop\n", "inv r1\n"]))
        assert [i.mnemonic for i in program] == ["nop", "inv"]

    def test_empty_source(self):
        program, symbols = parse("")
        assert program == Program()
        assert len(symbols) == 0
