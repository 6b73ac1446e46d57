"""promptseg: runtime-version prompt segment for shell prompts."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("promptseg")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from promptseg.api import evaluate, render
from promptseg.codes import SegmentOutcome
from promptseg.contracts import SegmentResult
from promptseg._internal.config import NodejsConfig, PromptConfig, load_config

__all__ = [
    "__version__",
    "evaluate",
    "render",
    "SegmentOutcome",
    "SegmentResult",
    "NodejsConfig",
    "PromptConfig",
    "load_config",
]
