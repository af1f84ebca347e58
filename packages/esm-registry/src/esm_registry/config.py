# SPDX-License-Identifier: MIT
"""Rewrite configuration for the ES module registry transform.

This module provides the RewriteOptions dataclass holding the names the
generated code uses for its runtime helpers, and the registry host the
module records are written into.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


class RewriteOptionsError(Exception):
    """Raised when rewrite configuration is invalid."""

    pass


# pyproject.toml table holding the options
PYPROJECT_SECTION = "esm-registry"

# Names spliced into generated code must be plain identifiers
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Host may be a dotted path such as "globalThis.sandbox"
HOST_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(?:\.[A-Za-z_$][A-Za-z0-9_$]*)*$")


@dataclass(frozen=True)
class RewriteOptions:
    """Names used by generated registry code.

    Attributes:
        host: Expression of the object holding the registry and stylesheet
        registry_property: Property of ``host`` holding the module registry
        stylesheet_property: Property of ``host`` accumulating CSS text
        module_binding: Local name of the current module record
        export_helper: Local name of the live export helper
        require_helper: Local name of the registry lookup helper
        dynamic_import_helper: Local name replacing dynamic ``import()``
        import_prefix: Prefix of generated import record identifiers
        emit_default_export: Whether to end with ``export default <record>``
    """

    host: str = "globalThis"
    registry_property: str = "__modules__"
    stylesheet_property: str = "__css__"
    module_binding: str = "__module__"
    export_helper: str = "__export__"
    require_helper: str = "__require__"
    dynamic_import_helper: str = "__dynamic_import__"
    import_prefix: str = "__import_"
    emit_default_export: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not HOST_PATTERN.match(self.host):
            raise RewriteOptionsError(f"host must be an identifier path, got {self.host!r}")

        for name in (
            "registry_property",
            "stylesheet_property",
            "module_binding",
            "export_helper",
            "require_helper",
            "dynamic_import_helper",
            "import_prefix",
        ):
            value = getattr(self, name)
            if not isinstance(value, str) or not IDENTIFIER_PATTERN.match(value):
                raise RewriteOptionsError(f"{name} must be a JavaScript identifier, got {value!r}")

        if not isinstance(self.emit_default_export, bool):
            raise RewriteOptionsError("emit_default_export must be a boolean")

    def record_id(self, index: int) -> str:
        """Return the identifier of the ``index``-th import record."""
        return f"{self.import_prefix}{index}__"

    @classmethod
    def from_pyproject(cls, pyproject_path: str | Path) -> "RewriteOptions":
        """Create RewriteOptions from the ``[tool.esm-registry]`` table.

        Args:
            pyproject_path: Path to pyproject.toml

        Returns:
            RewriteOptions instance (defaults when the table is absent)

        Raises:
            RewriteOptionsError: If the file or the table is invalid
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(pyproject_path)
        if not path.exists():
            raise FileNotFoundError(f"pyproject.toml not found: {path}")

        try:
            with open(path, "rb") as f:
                pyproject = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RewriteOptionsError(f"Invalid TOML syntax: {e}") from e

        return cls.from_pyproject_dict(pyproject)

    @classmethod
    def from_pyproject_dict(cls, pyproject: dict[str, Any]) -> "RewriteOptions":
        """Create RewriteOptions from a parsed pyproject.toml dictionary.

        Keys may be written in kebab-case or snake_case.
        """
        section = pyproject.get("tool", {}).get(PYPROJECT_SECTION, {})
        if not isinstance(section, dict):
            raise RewriteOptionsError(f"[tool.{PYPROJECT_SECTION}] must be a table")

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in section.items():
            name = key.replace("-", "_")
            if name not in known:
                raise RewriteOptionsError(f"Unknown option in [tool.{PYPROJECT_SECTION}]: {key}")
            values[name] = value

        return cls(**values)
