"""Text/Plain external transformation."""

from pipefilter.modules.transformations.external import ExternalTransformationsPlugin


class TextPlainExternal(ExternalTransformationsPlugin):
    """Handles the external transformation for text/plain columns."""

    @classmethod
    def get_mime_type(cls) -> str:
        return "Text"

    @classmethod
    def get_mime_subtype(cls) -> str:
        return "Plain"
