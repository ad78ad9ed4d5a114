"""Copy options and layered default merging.

Options are resolved per record from three layers, later overriding earlier:
built-in defaults <- the model's `copyable_options` <- call-site options.
Only fields explicitly set in a layer override the layers below it, and a set
field replaces the lower value wholesale (no deep merge).

Usage:
    options = CopyOptions(
        ignore_attributes={"slug"},
        overwrite={"title": "Copy of x"},
        relationships={"comments": {"deep": False}},
    )
    clone = await copier.copy(post, deep=True, options=options)
    options.trace.merged  # values applied to the root clone
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


@dataclass(slots=True)
class CopyTrace:
    """Intermediate values of the last copy that used an options object.

    Attributes:
        attributes: Results of the attribute pass.
        relationships: Results of the relationship pass (linked relationships
            are absent, they were set on the clone directly).
        merged: Final values assigned to the clone.
    """

    attributes: dict[str, Any]
    relationships: dict[str, Any]
    merged: dict[str, Any]


class CopyOptions(BaseModel):
    """Configuration for copying one record (and, via `relationships`, its children).

    Attributes:
        ignore_attributes: Attributes and relationships not copied at all.
        other_attributes: Extra properties read from the source and copied verbatim.
        copy_by_reference: Attributes and relationships shared instead of cloned.
        overwrite: Values forced onto the clone; wins over every other rule.
        relationships: Options for the records of each relationship; `deep`
            there overrides the depth of that relationship's copy.
        create_as_model: Create clones in the store (True) or as plain objects.
        object_definition: Factory for plain clones; a dict when omitted.
        deep: Depth override, only meaningful in `relationships` entries.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    ignore_attributes: frozenset[str] = frozenset()
    other_attributes: tuple[str, ...] = ()
    copy_by_reference: frozenset[str] = frozenset()
    overwrite: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, CopyOptions] = Field(default_factory=dict)
    create_as_model: bool = True
    object_definition: Callable[[], Any] | None = None
    deep: bool | None = None

    _trace: CopyTrace | None = PrivateAttr(default=None)

    @property
    def trace(self) -> CopyTrace | None:
        """Intermediate values from the last copy run with these options."""
        return self._trace


OptionsLike = CopyOptions | Mapping[str, Any] | None


def coerce_options(value: OptionsLike) -> CopyOptions:
    """Accept CopyOptions, a plain mapping, or None.

    Raises:
        TypeError: For any other value.
        pydantic.ValidationError: If a mapping has unknown or invalid fields.
    """
    if value is None:
        return CopyOptions()
    if isinstance(value, CopyOptions):
        return value
    if isinstance(value, Mapping):
        return CopyOptions.model_validate(dict(value))
    raise TypeError(f"Expected CopyOptions or mapping, got {type(value).__name__}")


def resolve_options(*layers: OptionsLike) -> CopyOptions:
    """Merge option layers; fields set in later layers win.

    Args:
        *layers: Option layers from lowest to highest precedence. None
            layers are skipped.

    Returns:
        New CopyOptions holding the merged values.
    """
    values: dict[str, Any] = {}
    for layer in layers:
        if layer is None:
            continue
        options = coerce_options(layer)
        values.update({name: getattr(options, name) for name in options.model_fields_set})
    return CopyOptions.model_validate(values)
