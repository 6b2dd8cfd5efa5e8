"""
pipefilter - External Program Transformations

Pipes column data through an administrator-approved external program
(for example an HTML pretty-printer) and returns its output.

Architecture:
- Each module is self-contained with clear interfaces
- Configuration is injected, never read from globals
- All communication through defined interfaces

Modules:
- registry: Administrator-curated table of permitted programs
- transformations: Transformation plugins and option handling
- executor: Subprocess launch and pipe exchange
"""

__version__ = "1.0.0"
