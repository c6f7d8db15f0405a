"""Arithmetic demo method served outside the tool registry."""

from __future__ import annotations

from mcp_lite.protocol.types import AddParams

ADD_METHOD = "add"


def add(params: AddParams) -> int:
    """Return the sum of the two operands."""
    return params.a + params.b
