# SPDX-License-Identifier: MIT
"""Tests for RewriteOptions."""

import pytest

from esm_registry import RewriteOptions, RewriteOptionsError


class TestRewriteOptions:
    """Tests for option defaults and validation."""

    def test_defaults(self):
        options = RewriteOptions()
        assert options.host == "globalThis"
        assert options.registry_property == "__modules__"
        assert options.module_binding == "__module__"
        assert options.emit_default_export is True

    def test_record_id(self):
        assert RewriteOptions().record_id(3) == "__import_3__"
        assert RewriteOptions(import_prefix="dep").record_id(0) == "dep0__"

    def test_dotted_host(self):
        assert RewriteOptions(host="globalThis.sandbox").host == "globalThis.sandbox"

    @pytest.mark.parametrize("host", ["", "a.", "window[0]", "a b", 7])
    def test_invalid_host(self, host):
        with pytest.raises(RewriteOptionsError, match="host"):
            RewriteOptions(host=host)

    @pytest.mark.parametrize(
        "field_name",
        ["registry_property", "module_binding", "export_helper", "require_helper", "import_prefix"],
    )
    def test_invalid_identifier(self, field_name):
        with pytest.raises(RewriteOptionsError, match=field_name):
            RewriteOptions(**{field_name: "not-valid"})

    def test_invalid_emit_default_export(self):
        with pytest.raises(RewriteOptionsError, match="emit_default_export"):
            RewriteOptions(emit_default_export="yes")


class TestFromPyproject:
    """Tests for loading options from pyproject.toml."""

    def test_missing_table_gives_defaults(self):
        assert RewriteOptions.from_pyproject_dict({"project": {"name": "x"}}) == RewriteOptions()

    def test_kebab_and_snake_keys(self):
        options = RewriteOptions.from_pyproject_dict(
            {"tool": {"esm-registry": {"host": "sandbox", "emit-default-export": False, "import_prefix": "dep"}}}
        )
        assert options == RewriteOptions(host="sandbox", emit_default_export=False, import_prefix="dep")

    def test_unknown_key(self):
        with pytest.raises(RewriteOptionsError, match="Unknown option"):
            RewriteOptions.from_pyproject_dict({"tool": {"esm-registry": {"hots": "x"}}})

    def test_table_required(self):
        with pytest.raises(RewriteOptionsError, match="must be a table"):
            RewriteOptions.from_pyproject_dict({"tool": {"esm-registry": "sandbox"}})

    def test_from_file(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool.esm-registry]\nhost = "sandbox"\nrequire-helper = "load"\n')

        options = RewriteOptions.from_pyproject(pyproject)
        assert options.host == "sandbox"
        assert options.require_helper == "load"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RewriteOptions.from_pyproject(tmp_path / "pyproject.toml")

    def test_invalid_toml(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.esm-registry\n")

        with pytest.raises(RewriteOptionsError, match="Invalid TOML"):
            RewriteOptions.from_pyproject(pyproject)
