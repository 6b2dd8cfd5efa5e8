"""
Base class for transformation plugins.

A transformation plugin turns the raw value of a column into what the
rendering layer displays. Plugins are bound to a MIME type/subtype pair and
take their behaviour from a positional options list.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Union

from pipefilter.modules.transformations.options import get_options


class TransformationsPlugin(ABC):
    """Common contract for all transformation plugins."""

    @classmethod
    @abstractmethod
    def get_info(cls) -> str:
        """Human readable description of the transformation."""

    @classmethod
    @abstractmethod
    def get_name(cls) -> str:
        """Short identifier of the transformation."""

    @classmethod
    @abstractmethod
    def get_mime_type(cls) -> str:
        """MIME type this transformation applies to, e.g. ``Text``."""

    @classmethod
    @abstractmethod
    def get_mime_subtype(cls) -> str:
        """MIME subtype this transformation applies to, e.g. ``Plain``."""

    @abstractmethod
    def apply_transformation(
        self,
        buffer: Union[str, bytes],
        options: Optional[Sequence[Any]] = None,
        meta: Optional[Any] = None,
    ) -> Union[str, bytes]:
        """Transform ``buffer`` according to ``options``."""

    def apply_transformation_no_wrap(self, options: Optional[Sequence[Any]] = None) -> bool:
        """Whether the output should be displayed without line wrapping."""
        return False

    @staticmethod
    def get_options(options: Optional[Sequence[Any]], defaults: Sequence[Any]) -> List[Any]:
        """Resolve every option position, falling back to ``defaults``."""
        return get_options(options, defaults)

    @classmethod
    def get_mime(cls) -> str:
        return f"{cls.get_mime_type()}/{cls.get_mime_subtype()}"
