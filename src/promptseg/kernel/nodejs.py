"""The Node.js prompt segment.

Shows the Node.js version when the directory looks like a JavaScript or
TypeScript project:

- it contains a `package.json` or `.node-version` file
- it contains a `.js`, `.mjs`, `.cjs` or `.ts` file
- it contains a `node_modules` directory

and is not an esy project (`esy.lock` directory). The version is styled
with `not_capable_style` when `package.json` declares an `engines.node`
range that the installed version does not satisfy.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from promptseg._internal.config import PromptConfig
from promptseg._internal.style import paint_ansi
from promptseg.codes import SegmentOutcome
from promptseg.contracts import SegmentResult
from promptseg.kernel.constraint import VersionExtractionError, is_compatible
from promptseg.kernel.formatter import Bindings, FormatError, Painter, render
from promptseg.kernel.oracle import NODE_VERSION_COMMAND, fetch_declared_constraint, fetch_runtime_version
from promptseg.kernel.probe import scan

logger = logging.getLogger(__name__)

SEGMENT_NAME = "nodejs"

VersionFetcher = Callable[[Sequence[str], float], Optional[str]]


def evaluate_nodejs(
    directory: Path,
    config: PromptConfig,
    fetch_version: VersionFetcher = fetch_runtime_version,
    paint: Painter = paint_ansi,
) -> SegmentResult:
    """Evaluate the Node.js segment for `directory`.

    Args:
        directory: Current working directory of the prompt
        config: Resolved prompt configuration
        fetch_version: Runs the version command; returns stdout or None
        paint: Presentation wrapper for styled text

    Returns:
        SegmentResult; `output` is None whenever the segment is omitted.
    """
    options = config.nodejs
    if options.disabled:
        return SegmentResult(name=SEGMENT_NAME, outcome=SegmentOutcome.DISABLED)

    match = scan(directory, options.probe_spec())
    if not match.relevant:
        outcome = SegmentOutcome.EXCLUDED if match.reason == "excluded" else SegmentOutcome.NOT_RELEVANT
        return SegmentResult(name=SEGMENT_NAME, outcome=outcome)

    raw_version = fetch_version(NODE_VERSION_COMMAND, config.command_timeout / 1000)
    if raw_version is None:
        return SegmentResult(name=SEGMENT_NAME, outcome=SegmentOutcome.RUNTIME_UNAVAILABLE)
    version = raw_version.strip()

    constraint = fetch_declared_constraint(directory)
    try:
        compatible = is_compatible(raw_version, constraint)
    except VersionExtractionError as e:
        logger.warning(f"Error in segment '{SEGMENT_NAME}': {e}")
        return SegmentResult(
            name=SEGMENT_NAME,
            outcome=SegmentOutcome.VERSION_UNPARSEABLE,
            version=version,
            constraint=constraint,
            error=str(e),
        )

    bindings = Bindings(
        symbol=options.symbol,
        style=options.style if compatible else options.not_capable_style,
        version=version,
    )
    try:
        output = render(options.format, bindings, paint=paint)
    except FormatError as e:
        logger.warning(f"Error in segment '{SEGMENT_NAME}':\n{e}")
        return SegmentResult(
            name=SEGMENT_NAME,
            outcome=SegmentOutcome.FORMAT_ERROR,
            version=version,
            constraint=constraint,
            compatible=compatible,
            error=str(e),
        )

    return SegmentResult(
        name=SEGMENT_NAME,
        outcome=SegmentOutcome.RENDERED,
        output=output,
        version=version,
        constraint=constraint,
        compatible=compatible,
    )
