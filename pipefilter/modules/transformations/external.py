#!/usr/bin/env python3
"""
External transformations - pipe column data through an external program.

The program is chosen from a ProgramRegistry the administrator fills in;
users can only pick an entry by its index. Options:

    [0] program index (unknown indices fall back to entry 0)
    [1] legacy extra arguments (deprecated, triggers a warning)
    [2] escape the output for HTML when set to 1
    [3] disable wrapping when set to 1 (default)
"""

import codecs
import html
import logging
import threading
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Union

from pipefilter.modules.executor.pipe_runner import run_filter
from pipefilter.modules.registry.registry import ProgramRegistry
from pipefilter.modules.transformations.base import TransformationsPlugin
from pipefilter.modules.transformations.errors import ConfigurationError, LaunchFailed
from pipefilter.modules.transformations.models import TransformationResult, TransformStatus
from pipefilter.modules.transformations.options import (
    get_options,
    is_unset,
    loose_equals,
    option_at,
)

if TYPE_CHECKING:
    from pipefilter.config.provider import TransformationConfig

logger = logging.getLogger("pipefilter.external")
deprecation_logger = logging.getLogger("pipefilter.deprecation")

# Program index, legacy arguments, escape output, disable wrapping
BASELINE_OPTIONS: List[Any] = [0, "", 1, 1]

LEGACY_ARGS_DEPRECATION = (
    "You are using the external transformation command line options field, "
    "which has been deprecated for security reasons. Add all command line "
    "options directly to the program definition in %s."
)


class ExternalTransformationsPlugin(TransformationsPlugin):
    """Provides the common behaviour of all external transformation plugins."""

    def __init__(
        self,
        registry: ProgramRegistry,
        default_options: Optional[Sequence[Any]] = None,
        timeout_seconds: Optional[float] = None,
        encoding: str = "utf-8",
        diagnostics: Optional[logging.Logger] = None,
        config_source: str = "the programs configuration",
    ):
        """
        Initialize the plugin with explicit configuration.

        Args:
            registry: Administrator-approved programs
            default_options: Defaults for unset option positions
            timeout_seconds: Deadline for each program run (required when
                the registry is not empty)
            encoding: Text encoding used on both pipes
            diagnostics: Logger receiving deprecation warnings
            config_source: Where programs are defined, quoted in warnings

        Raises:
            ConfigurationError: If no usable timeout is given or the encoding
                is unknown
        """
        if registry and (timeout_seconds is None or timeout_seconds <= 0):
            raise ConfigurationError(
                f"A positive timeout is required for external transformations, got {timeout_seconds!r}"
            )

        try:
            codecs.lookup(encoding)
        except (LookupError, TypeError) as e:
            raise ConfigurationError(f"Unknown encoding: {encoding!r}") from e

        self.registry = registry
        self.default_options = get_options(default_options, BASELINE_OPTIONS)
        self.timeout_seconds = timeout_seconds
        self.encoding = encoding
        self.diagnostics = diagnostics or deprecation_logger
        self.config_source = config_source

    @classmethod
    def from_config(cls, config: "TransformationConfig", **kwargs) -> "ExternalTransformationsPlugin":
        """Build a plugin from loaded configuration."""
        return cls(
            registry=config.build_registry(),
            default_options=config.default_options(cls.get_name()),
            timeout_seconds=config.timeout_seconds,
            encoding=config.encoding,
            config_source=config.source,
            **kwargs,
        )

    @classmethod
    def get_info(cls) -> str:
        return (
            "LINUX ONLY: Launches an external application and feeds it the column"
            " data via standard input. Returns the standard output of the"
            " application. The default is Tidy, to pretty-print HTML code."
            " For security reasons, you have to list the tools you want to make"
            " available in the programs configuration; nothing is allowed by"
            " default. The first option is then the number of the program you"
            " want to use. The second option should be blank for historical"
            " reasons. The third option, if set to 1, will escape the output"
            " for HTML (Default 1). The fourth option, if set to 1, will"
            " prevent wrapping and ensure that the output appears all on one"
            " line (Default 1)."
        )

    @classmethod
    def get_name(cls) -> str:
        return "External"

    def apply_transformation_no_wrap(self, options: Optional[Sequence[Any]] = None) -> bool:
        """Disable wrapping unless option 3 is set to something other than 1."""
        no_wrap = option_at(options, 3)
        # False loosely equals the empty string, so it counts as unset
        if is_unset(no_wrap) or no_wrap is False:
            return True
        return loose_equals(no_wrap, 1)

    def apply_transformation(
        self,
        buffer: Union[str, bytes],
        options: Optional[Sequence[Any]] = None,
        meta: Optional[Any] = None,
    ) -> Union[str, bytes]:
        """
        Run ``buffer`` through the selected program and return its output.

        ``meta`` is accepted for compatibility with other plugins and ignored.
        """
        return self.run(buffer, options, meta).text

    def run(
        self,
        buffer: Union[str, bytes],
        options: Optional[Sequence[Any]] = None,
        meta: Optional[Any] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> TransformationResult:
        """
        Run the transformation and describe how the result was produced.

        Args:
            buffer: Column data
            options: Transformation options (see module docstring)
            meta: Column metadata, unused
            cancel_event: Optional event that aborts a running program

        Returns:
            TransformationResult with the output and the no-wrap hint

        Raises:
            LaunchFailed: If the program cannot be started
            TransformationTimeout: If the program exceeds the deadline
            TransformationCancelled: If ``cancel_event`` is set while running
        """
        no_wrap = self.apply_transformation_no_wrap(options)

        if not self.registry:
            return TransformationResult(
                text=buffer, no_wrap=no_wrap, status=TransformStatus.PASSTHROUGH
            )

        options = self.get_options(options, self.default_options)
        program = self.registry.resolve(options[0])

        legacy_args = "" if options[1] is None else str(options[1])
        if legacy_args:
            self.diagnostics.warning(LEGACY_ARGS_DEPRECATION % self.config_source)

        try:
            argv = program.argv(legacy_args)
        except ValueError as e:
            # Unbalanced quotes in the argument text
            raise LaunchFailed(program.path, e) from e

        data = buffer.encode(self.encoding, errors="replace") if isinstance(buffer, str) else buffer
        result = run_filter(argv, data, self.timeout_seconds, cancel_event)

        if result.return_code != 0:
            # The exit status does not affect the output
            logger.debug(f"{program.path} exited with status {result.return_code}")

        output = result.stdout.decode(self.encoding, errors="replace")

        if loose_equals(options[2], 1) or loose_equals(options[2], "2"):
            output = escape_html(output)

        return TransformationResult(
            text=output,
            no_wrap=no_wrap,
            status=TransformStatus.TRANSFORMED,
            program=program.path,
            return_code=result.return_code,
        )


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for safe embedding in HTML."""
    return html.escape(text, quote=True).replace("&#x27;", "&#039;")
