# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for esm_registry tests."""

from __future__ import annotations

from typing import Callable, Optional

import pytest

from esm_registry import RewriteOptions, transform
from esm_registry.context import RewriteContext
from esm_registry.parser import parse_module

DEFAULT_TRAILER = "\nexport default __module__\n"


def split_output(code: str) -> tuple[str, str]:
    """Split generated code into (header, rest); the header ends at the first blank line."""
    header, _, rest = code.partition("\n\n")
    return header, rest


@pytest.fixture
def rewrite_body() -> Callable[..., str]:
    """Transform a script and return the code after the bootstrap header."""

    def _rewrite(script: str, css: Optional[str] = None, **kwargs) -> str:
        result = transform(script, "test-module", css, **kwargs)
        return split_output(result.code)[1]

    return _rewrite


@pytest.fixture
def make_context() -> Callable[[str], RewriteContext]:
    """Create a RewriteContext over a script with default options."""

    def _make(script: str, options: Optional[RewriteOptions] = None) -> RewriteContext:
        return RewriteContext.create(parse_module(script, "test-module"), options or RewriteOptions())

    return _make
