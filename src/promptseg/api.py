"""Public API for promptseg.

High-level functions that take a directory and return either a complete,
structured result or just the text to print.
"""

import os
from pathlib import Path
from typing import Optional, Union

from promptseg._internal.config import PromptConfig, load_config
from promptseg.contracts import SegmentResult
from promptseg.kernel.nodejs import evaluate_nodejs


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def evaluate(
    directory: Union[str, os.PathLike, Path],
    config: Optional[PromptConfig] = None,
) -> SegmentResult:
    """Evaluate the Node.js segment for a directory.

    Args:
        directory: Directory the prompt is shown in
        config: Prompt configuration; loaded with load_config() when omitted

    Returns:
        SegmentResult describing the outcome. Never raises for missing
        runtimes, bad manifests or bad templates.
    """
    if config is None:
        config = load_config()
    return evaluate_nodejs(_normalize_path(directory), config)


def render(
    directory: Union[str, os.PathLike, Path],
    config: Optional[PromptConfig] = None,
) -> Optional[str]:
    """Return the rendered segment text, or None when it should be omitted."""
    return evaluate(directory, config).output
