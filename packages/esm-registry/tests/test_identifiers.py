# SPDX-License-Identifier: MIT
"""Tests for rebinding references to imported names."""

import pytest

from esm_registry import transform
from esm_registry.bindings import collect_imports
from esm_registry.identifiers import rewrite_identifiers

from conftest import DEFAULT_TRAILER

IMPORT_X = "import { x } from './a';\n"


@pytest.fixture
def rewrite(rewrite_body):
    """Rewrite a module body that imports ``x`` from './a'."""

    def _rewrite(body: str) -> str:
        rest = rewrite_body(IMPORT_X + body)
        assert rest.endswith(DEFAULT_TRAILER)
        # The deleted import statement leaves its newline behind
        return rest[: -len(DEFAULT_TRAILER)].removeprefix("\n")

    return _rewrite


class TestReferences:
    """Tests for plain references."""

    def test_call(self, rewrite):
        assert rewrite("x()\n") == "__import_0__.x()\n"

    def test_member_object(self, rewrite):
        assert rewrite("x.y.z\n") == "__import_0__.x.y.z\n"

    def test_property_names_are_not_references(self, rewrite):
        source = "o.x\nconst p = { x: 1 }\nclass C { x() {} }\n"
        assert rewrite(source) == source

    def test_labels_are_not_references(self, rewrite):
        source = "x: for (;;) { break x }\n"
        assert rewrite(source) == source

    def test_default_parameter_value(self, rewrite):
        assert rewrite("function f(a = x) { return a }\n") == "function f(a = __import_0__.x) { return a }\n"

    def test_default_and_namespace_bindings(self, rewrite_body):
        rest = rewrite_body("import A, * as ns from './m'\nA(ns)\n")
        assert rest == "\n__import_0__.default(__import_0__)\n" + DEFAULT_TRAILER

    def test_non_identifier_export_name(self, rewrite_body):
        rest = rewrite_body("import { 'kebab-name' as k } from './m'\nk()\n")
        assert rest == '\n__import_0__["kebab-name"]()\n' + DEFAULT_TRAILER

    def test_count(self):
        result = transform(IMPORT_X + "x(x)\nconst o = { x }\n", "m")
        assert result.rewritten_references == 3

    def test_nothing_imported(self, make_context):
        ctx = make_context("x()\n")
        collect_imports(ctx)
        assert rewrite_identifiers(ctx) == 0
        assert not ctx.buffer.has_changed()


class TestShadowing:
    """Tests for names shadowed by inner scopes."""

    def test_function_parameter(self, rewrite):
        assert rewrite("function f(x) { return x }\nx\n") == "function f(x) { return x }\n__import_0__.x\n"

    def test_arrow_parameters(self, rewrite):
        source = "const g = x => x\nconst h = (a) => x + a\n"
        assert rewrite(source) == "const g = x => x\nconst h = (a) => __import_0__.x + a\n"

    def test_destructured_parameter(self, rewrite):
        source = "function f({ x }) { return x }\n"
        assert rewrite(source) == source

    def test_block_declaration(self, rewrite):
        assert rewrite("{ const x = 1; x }\nx\n") == "{ const x = 1; x }\n__import_0__.x\n"

    def test_block_function_declaration(self, rewrite):
        source = "{ function x() {} x() }\n"
        assert rewrite(source) == source

    def test_catch_parameter(self, rewrite):
        source = "try { f() } catch (x) { x }\n"
        assert rewrite(source) == source

    def test_for_of_head(self, rewrite):
        source = "for (const x of list) g(x)\n"
        assert rewrite(source) == source

    def test_for_initializer(self, rewrite):
        source = "for (let i = x; i < 1; i++) {}\n"
        assert rewrite(source) == "for (let i = __import_0__.x; i < 1; i++) {}\n"

    def test_hoisted_var(self, rewrite):
        source = "function f() { if (1) { var x = 2 } return x }\n"
        assert rewrite(source) == source

    def test_named_function_expression(self, rewrite):
        source = "const f = function x() { return x }\n"
        assert rewrite(source) == source

    def test_named_class_expression(self, rewrite):
        source = "const C = class x { m() { return x } }\n"
        assert rewrite(source) == source

    def test_class_expression_name_stays_inside(self, rewrite):
        source = "const C = class x {}\nx()\n"
        assert rewrite(source) == "const C = class x {}\n__import_0__.x()\n"

    def test_shadowing_ends_with_scope(self, rewrite):
        source = "function f(x) {}\nfunction g() { return x }\n"
        assert rewrite(source) == "function f(x) {}\nfunction g() { return __import_0__.x }\n"


class TestObjectShorthand:
    """Tests for shorthand properties and destructuring."""

    def test_object_literal(self, rewrite):
        assert rewrite("const o = { x }\n") == "const o = { x: __import_0__.x }\n"

    def test_nested_object_literal(self, rewrite):
        assert rewrite("f({ a: { x } })\n") == "f({ a: { x: __import_0__.x } })\n"

    def test_declaration_pattern_key_untouched(self, rewrite):
        assert rewrite("const { x: y } = x\n") == "const { x: y } = __import_0__.x\n"

    def test_destructuring_assignment(self, rewrite):
        assert rewrite("({ x } = o)\n") == "({ x: __import_0__.x } = o)\n"

    def test_array_destructuring_assignment(self, rewrite):
        assert rewrite("[x] = arr\n") == "[__import_0__.x] = arr\n"


class TestSuperclass:
    """Tests for `extends` clauses."""

    def test_named_import_gets_helper_once(self, rewrite_body):
        rest = rewrite_body(
            "import { Base } from './b'\nclass A extends Base {}\nclass B extends Base {}\n"
        )
        assert rest == (
            "\nconst Base = __import_0__.Base;\nclass A extends Base {}\nclass B extends Base {}\n"
            + DEFAULT_TRAILER
        )

    def test_namespace_member_is_rewritten_in_place(self, rewrite_body):
        rest = rewrite_body("import * as ns from './b'\nclass A extends ns.Base {}\n")
        assert rest == "\nclass A extends __import_0__.Base {}\n" + DEFAULT_TRAILER

    def test_namespace_superclass_is_rewritten_in_place(self, rewrite_body):
        rest = rewrite_body("import * as Base from './b'\nclass A extends Base {}\n")
        assert rest == "\nclass A extends __import_0__ {}\n" + DEFAULT_TRAILER

    def test_class_expression_is_rewritten_in_place(self, rewrite_body):
        rest = rewrite_body("import { Base } from './b'\nconst A = class extends Base {}\n")
        assert rest == "\nconst A = class extends __import_0__.Base {}\n" + DEFAULT_TRAILER

    def test_exported_class(self, rewrite_body):
        rest = rewrite_body("import { Base } from './b'\nexport class A extends Base {}\n")
        assert rest == (
            "\nconst Base = __import_0__.Base;\nclass A extends Base {}\n"
            '\n__export__(__module__, "A", () => A)'
            + DEFAULT_TRAILER
        )


class TestExportStatements:
    """Tests for references inside export statements."""

    def test_export_default_expression(self, rewrite):
        assert rewrite("export default x\n") == "__module__.default = __import_0__.x\n"

    def test_exported_declaration(self, rewrite_body):
        rest = rewrite_body(IMPORT_X + "export const y = x + 1\n")
        assert rest == (
            "\nconst y = __import_0__.x + 1\n"
            '\n__export__(__module__, "y", () => y)'
            + DEFAULT_TRAILER
        )

    def test_export_clause_forwards_binding(self, rewrite_body):
        rest = rewrite_body(IMPORT_X + "export { x }\n")
        assert rest == '\n\n\n__export__(__module__, "x", () => __import_0__.x)' + DEFAULT_TRAILER
