# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end integration tests for the complete CHIP-8 assembler.
# These tests verify the full pipeline from source text to encoded words.
#
# Test coverage includes:
#   - Complete program assembly
#   - Error collection and fail-fast mode
#   - Listing and symbol file output
#   - Edge cases and boundary conditions
# =============================================================================

import pytest

from chip8_sdk import assemble, assemble_file
from chip8_sdk.assembler import Assembler, OrphanPolicy
from chip8_sdk.errors import (
    AssemblerError,
    InvalidNumberError,
    MalformedDirectiveError,
    OrphanLineError,
    UnknownInstructionError,
)


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to hex words."""

    def test_minimal_program(self):
        result = assemble(": START\nCLS")
        assert result.ok
        assert result.words == ["00E0"]

    def test_forward_label_reference(self):
        source = """
            : START
                CLS
            : LOOP
                JP LOOP
        """
        result = assemble(source)
        assert result.words == ["00E0", "1202"]

    def test_alias(self):
        source = """
            :ALIAS COUNT V3
            : START
                LD COUNT, 5
        """
        assert assemble(source).words == ["6305"]

    def test_start_declared_after_subroutine(self):
        source = """
            : DRAW
                LD I, SPRITE
                DRW V0, V1, 5
                RET
            : START
                CALL DRAW
                JP START
            : SPRITE
                0xF0 0x90 0x90 0x90 0xF0
        """
        result = assemble(source)
        # START 0x200 (4 bytes), DRAW 0x204 (6 bytes), SPRITE 0x20A
        assert result.words == ["A20A", "D015", "00EE", "2204", "1200", "F0909090F0"]
        assert result.hex == "A20AD01500EE22041200F0909090F0"

    def test_full_instruction_mix(self):
        source = """
            :ALIAS X V0
            :ALIAS Y V1
            : START
                LD X, 0          ; x position
                LD Y, 0b1010     ; y position
                LD I, DIGIT
            : MAIN
                LD F, X
                DRW X, Y, 5
                LD V2, K
                SKP V2
                JP MAIN
                ADD X, 1
                SE X, 0x40
                JP MAIN
                RET
            : DIGIT
                $F0 $10 $F0 $80 $F0
        """
        result = assemble(source)
        assert result.ok
        assert result.words == [
            "6000", "610A", "A218",
            "F029", "D015", "F20A", "E29E", "1206", "7001", "3040", "1206", "00EE",
            "F010F080F0",
        ]

    def test_aliased_mnemonic_keeps_addresses_aligned(self):
        asm = Assembler()
        result = asm.assemble_string(":ALIAS CLEAR CLS\n: START\nCLEAR\n: LOOP\nJP LOOP")
        assert result.words == ["00E0", "1202"]
        assert asm.get_symbols() == {"START": 0x200, "LOOP": 0x202}
        assert len(result.hex) // 2 == result.program.size

    def test_symbols(self):
        asm = Assembler()
        asm.assemble_string(": START\nCLS\n: LOOP\nJP LOOP")
        assert asm.get_symbols() == {"START": 0x200, "LOOP": 0x202}


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Line errors are collected; preprocessing errors are raised."""

    SOURCE = """
        : START
            CLS
            NOP
            LD V1, FOO
            RET
    """

    def test_errors_collected(self):
        asm = Assembler()
        result = asm.assemble_string(self.SOURCE)
        assert not result.ok
        assert result.words == ["00E0", "00EE"]
        assert [type(err.error) for err in result.errors] == [
            UnknownInstructionError, InvalidNumberError,
        ]
        assert asm.has_errors()
        assert len(asm.get_errors()) == 2

    def test_fail_fast(self):
        asm = Assembler(fail_fast=True)
        result = asm.assemble_string(self.SOURCE)
        assert result.words == ["00E0"]
        assert len(result.errors) == 1
        assert asm.has_errors()

    def test_error_location(self):
        result = assemble(self.SOURCE, filename="game.c8s")
        error = result.errors[0].error
        assert error.location.filename == "game.c8s"
        assert error.location.line == 3
        assert str(error).startswith("game.c8s:3: error: Unknown instruction: NOP")

    def test_error_line_format(self):
        result = assemble(self.SOURCE)
        assert result.errors[0].format() == "Error on line 3 (NOP) | Unknown instruction: NOP"

    def test_max_errors(self):
        source = ": START\n" + "NOP\n" * 10
        asm = Assembler(max_errors=3)
        result = asm.assemble_string(source)
        assert len(result.errors) == 3

    def test_error_report(self):
        asm = Assembler()
        asm.assemble_string(self.SOURCE)
        assert "2 errors, 0 warnings" in asm.get_error_report()

    def test_malformed_directive_raised(self):
        with pytest.raises(MalformedDirectiveError):
            assemble(":ALIAS ONLY\n: START\nCLS")

    def test_orphan_raised(self):
        with pytest.raises(OrphanLineError):
            assemble("CLS\n: START\nRET")

    def test_orphan_discarded(self):
        result = assemble("CLS\n: START\nRET", orphan_policy=OrphanPolicy.DISCARD)
        assert result.words == ["00EE"]

    def test_discarded_lines_in_report(self):
        asm = Assembler(orphan_policy=OrphanPolicy.DISCARD)
        asm.assemble_string("CLS\n: START\nRET", filename="game.c8s")
        assert not asm.has_errors()
        report = asm.get_error_report()
        assert "Warnings:" in report
        assert "game.c8s:0: discarding line outside of any label: CLS" in report
        assert report.endswith("0 errors, 1 warning")

    def test_nothing_assembled(self):
        with pytest.raises(AssemblerError):
            Assembler().get_program()

    def test_reuse_clears_errors(self):
        asm = Assembler()
        asm.assemble_string(self.SOURCE)
        asm.assemble_string(": START\nCLS")
        assert not asm.has_errors()


# =============================================================================
# Output Tests
# =============================================================================

class TestOutput:
    """Listing and symbol file generation."""

    def test_listing(self):
        result = assemble(": START\ncls\n: LOOP\njp loop")
        assert result.listing().splitlines() == [
            " CLS" + " " * 27 + " | 00E0",
            " JP LOOP" + " " * 23 + " | 1202",
        ]

    def test_listing_includes_errors_in_order(self):
        result = assemble(": START\nNOP\nCLS")
        lines = result.listing().splitlines()
        assert lines[0].startswith("Error on line 1 (NOP)")
        assert lines[1].endswith("| 00E0")

    def test_write_listing(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(": START\nCLS")
        path = tmp_path / "out.lst"
        asm.write_listing(path)
        assert path.read_text().strip().endswith("| 00E0")

    def test_write_symbols(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(": DATA\n1 2 3\n: START\nCLS")
        path = tmp_path / "out.sym"
        asm.write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0].startswith("START")
        assert "$200" in lines[0]
        assert lines[1].startswith("DATA")
        assert "$202" in lines[1]
        assert "3 bytes" in lines[1]

    def test_assemble_file(self, tmp_path):
        path = tmp_path / "game.c8s"
        path.write_text(": START\nCLS\nRET\n")
        result = assemble_file(path)
        assert result.words == ["00E0", "00EE"]

    def test_assemble_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "missing.c8s")
