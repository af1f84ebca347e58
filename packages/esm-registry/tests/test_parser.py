# SPDX-License-Identifier: MIT
"""Tests for the tree-sitter adapter."""

import pytest

from esm_registry.parser import Diagnostic, ModuleParseError, parse_module


class TestParseModule:
    """Tests for parse_module and ParsedModule."""

    def test_statements_skip_comments_and_hashbang(self):
        parsed = parse_module("#!/usr/bin/env node\n// note\nconst a = 1;\n/* end */\n")
        assert [node.type for node in parsed.statements()] == ["lexical_declaration"]

    def test_ascii_offsets(self):
        parsed = parse_module("let a = 1;\nlet b = 2;\n")
        second = parsed.statements()[1]

        assert parsed.start(second) == 11
        assert parsed.end(second) == 21
        assert parsed.text(second) == "let b = 2;"

    @pytest.mark.parametrize(
        "prefix",
        ["const s = 'ü';\n", "const s = '€';\n", "const s = '\U0001f600';\n"],
    )
    def test_character_offsets(self, prefix):
        parsed = parse_module(prefix + "let t = 1;\n")
        second = parsed.statements()[1]

        assert parsed.start(second) == len(prefix)
        assert parsed.text(second) == "let t = 1;"

    def test_position(self):
        parsed = parse_module("let a = 1;\nlet b = 2;\n")
        assert parsed.position(0) == (1, 1)
        assert parsed.position(15) == (2, 5)

    def test_source_is_kept(self):
        source = "export default 1\n"
        parsed = parse_module(source, "m.js")
        assert parsed.source == source
        assert parsed.module_id == "m.js"
        assert parsed.diagnostics() == []


class TestParseErrors:
    """Tests for syntax error reporting."""

    def test_raises_with_diagnostics(self):
        with pytest.raises(ModuleParseError) as excinfo:
            parse_module("let a = 1;\nconst b = (1 + ;\n", "broken.js")

        error = excinfo.value
        assert error.module_id == "broken.js"
        assert error.diagnostics
        assert error.diagnostics[0].line == 2
        assert str(error).startswith("Syntax error in broken.js: 2:")

    def test_diagnostics_are_ordered(self):
        with pytest.raises(ModuleParseError) as excinfo:
            parse_module("let a = (;\nlet b = 1;\nlet c = (;\n")

        positions = [(d.line, d.column) for d in excinfo.value.diagnostics]
        assert positions == sorted(positions)

    def test_diagnostic_format(self):
        assert str(Diagnostic(3, 7, "Missing ;")) == "3:7: Missing ;"
