#!/usr/bin/env python3
"""
Program Registry for external transformations.

Holds the administrator-approved table of external programs. Entries are
loaded once from configuration and never change afterwards; nothing in the
table is ever derived from user input.
"""

import logging
import os
import shlex
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pipefilter.modules.transformations.errors import ConfigurationError

logger = logging.getLogger("pipefilter.registry")

# Entry used when a selector does not match any configured program
FALLBACK_INDEX = 0


class ProgramEntry(BaseModel):
    """A single permitted program and its fixed arguments."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: int = Field(..., ge=0, description="Selector value used in transformation options")
    path: str = Field(..., min_length=1, description="Absolute path of the executable")
    args: str = Field(default="", description="Fixed argument string set by the administrator")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v):
        """Only absolute paths may be registered."""
        if not os.path.isabs(v):
            raise ValueError(f"Program path must be absolute: {v}")
        return v

    @field_validator("args")
    @classmethod
    def validate_args(cls, v):
        """Fixed arguments must split cleanly."""
        try:
            shlex.split(v)
        except ValueError as e:
            raise ValueError(f"Cannot split program arguments {v!r}: {e}")
        return v

    def argv(self, extra_args: str = "") -> List[str]:
        """
        Build the argument vector for this program.

        Args:
            extra_args: Additional argument text appended after the fixed arguments

        Returns:
            List suitable for subprocess (no shell involved)
        """
        return [self.path, *shlex.split(self.args), *shlex.split(extra_args)]

    @property
    def command_line(self) -> str:
        return " ".join(part for part in (self.path, self.args) if part)


class ProgramRegistry:
    """Immutable, ordered mapping of selector index to program entry."""

    def __init__(self, entries: Iterable[ProgramEntry] = ()):
        table: Dict[int, ProgramEntry] = {}
        for entry in entries:
            if entry.index in table:
                raise ConfigurationError(f"Duplicate program index: {entry.index}")
            table[entry.index] = entry

        if table and FALLBACK_INDEX not in table:
            raise ConfigurationError(
                f"Program registry must define index {FALLBACK_INDEX} as the fallback entry"
            )

        self._entries: Mapping[int, ProgramEntry] = MappingProxyType(dict(sorted(table.items())))

    @classmethod
    def from_config(
        cls, programs: Optional[Union[List[Dict[str, Any]], Dict[Any, Any]]]
    ) -> "ProgramRegistry":
        """
        Build a registry from configuration data.

        Accepts either a list of ``{index, path, args}`` mappings or a mapping
        of index to path (or to ``{path, args}``).

        Raises:
            ConfigurationError: If any entry is invalid
        """
        if not programs:
            return cls()

        if isinstance(programs, dict):
            items = []
            for index, value in programs.items():
                if isinstance(value, dict):
                    items.append({"index": index, **value})
                else:
                    items.append({"index": index, "path": value})
        elif isinstance(programs, list):
            items = programs
        else:
            raise ConfigurationError(f"Invalid programs configuration: {programs!r}")

        entries = []
        for item in items:
            try:
                entries.append(ProgramEntry.model_validate(item))
            except ValidationError as e:
                raise ConfigurationError(f"Invalid program entry {item!r}: {e}") from e

        registry = cls(entries)
        logger.info(f"Program registry loaded with {len(registry)} program(s)")
        return registry

    def resolve(self, selector: Any) -> ProgramEntry:
        """
        Return the entry for ``selector``, falling back to the default entry.

        An unknown or malformed selector is not an error.

        Raises:
            LookupError: If the registry is empty
        """
        if not self._entries:
            raise LookupError("Program registry is empty")

        index = _selector_index(selector)
        if index is not None and index in self._entries:
            return self._entries[index]

        logger.debug(f"Selector {selector!r} not registered, using index {FALLBACK_INDEX}")
        return self._entries[FALLBACK_INDEX]

    def get(self, index: int) -> Optional[ProgramEntry]:
        return self._entries.get(index)

    def __contains__(self, index: object) -> bool:
        return index in self._entries

    def __getitem__(self, index: int) -> ProgramEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[ProgramEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


def _selector_index(selector: Any) -> Optional[int]:
    """Turn an option value such as ``1`` or ``'1'`` into a registry index."""
    if isinstance(selector, bool):
        return int(selector)
    if isinstance(selector, int):
        return selector
    if isinstance(selector, float):
        return int(selector) if selector.is_integer() else None
    if isinstance(selector, str):
        text = selector.strip()
        if text.isascii() and text.isdecimal():
            return int(text)
    return None
