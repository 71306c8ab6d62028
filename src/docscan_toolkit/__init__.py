"""Top-level package for the document scan toolkit.

Provides subpackages:
- docscan_toolkit.core – immutable data models and the error taxonomy
- docscan_toolkit.capture – the ordered store of captured photographs
- docscan_toolkit.assembler – photographs → multi-page PDF pipeline
- docscan_toolkit.cli – command-line entry point
"""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "docscan-toolkit"

try:
    __version__ = version(DISTRIBUTION)
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0"

__all__: list[str] = ["__version__"]
