"""Options builder with explicit layering.

This module provides OptionsBuilder for building GlobalOptions by composing
option layers (defaults, static configuration, override string) with
explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any

from webvideo.config.models import (
    DEFAULT_OPTIONS,
    GlobalOptions,
    OptionsLayer,
    OutputSpec,
)


class OptionsBuilder:
    """Builds GlobalOptions by layering OptionsLayers with precedence.

    Later layers override earlier ones for every non-None scalar field.
    The output list is the exception: it never merges. The most recently
    applied layer that defines a non-empty list replaces it entirely.

    Example:
        builder = OptionsBuilder()
        builder.apply(DEFAULT_OPTIONS)
        builder.apply(static_layer)
        builder.apply(override_layer)
        options = builder.build()
        outputs = builder.output_files
    """

    # Fields with special handling (replace whole, never merge)
    _SPECIAL_FIELDS = frozenset({"output_files"})

    def __init__(self) -> None:
        """Initialize the builder with no values set."""
        self._values: dict[str, Any] = {}
        self._output_files: tuple[OutputSpec, ...] = ()

    def apply(self, layer: OptionsLayer) -> None:
        """Apply an options layer, overriding existing values.

        Args:
            layer: Options layer to apply.
        """
        for field_obj in fields(layer):
            if field_obj.name in self._SPECIAL_FIELDS:
                continue

            value = getattr(layer, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

        if layer.output_files:
            self._output_files = tuple(layer.output_files)

    @property
    def output_files(self) -> tuple[OutputSpec, ...]:
        """The winning output list, or an empty tuple if no layer set one."""
        return self._output_files

    def _get(self, key: str) -> Any:
        return self._values.get(key, getattr(DEFAULT_OPTIONS, key))

    def build(self) -> GlobalOptions:
        """Build GlobalOptions, falling back to built-in defaults.

        Returns:
            Complete GlobalOptions with all values resolved.
        """
        return GlobalOptions(
            file_name_template=self._get("file_name_template"),
            output_path=self._get("output_path"),
            public_path=self._get("public_path"),
            mute=self._get("mute"),
            size=self._get("size"),
            cache=self._get("cache"),
            es_module=self._get("es_module"),
        )
