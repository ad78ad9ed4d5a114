"""Core type definitions for recordcopy."""

from typing import TypeVar

from typing_extensions import TypeAliasType

T = TypeVar("T")

Clone = TypeAliasType("Clone", T, type_params=(T,))
"""Type alias indicating a value is a clone produced by the copy engine.

A Clone[T] has the same shape as its source but is independent of it:
attribute values were cloned or copied as immutable primitives, and related
records are either clones from the same session or the source's related
records linked by reference.
"""
