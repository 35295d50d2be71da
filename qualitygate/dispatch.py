from typing import Callable, Iterable, List

from qualitygate import xslt
from qualitygate.errors import TransformError
from qualitygate.models import (
    SKIPPED,
    TRANSFORMED,
    BuildUnit,
    ToolConfig,
    TransformOutcome,
    report_paths,
)

Transform = Callable[..., object]


def run_post_processing(tool_config: ToolConfig, units: Iterable[BuildUnit],
                        transform: Transform = xslt.transform) -> List[TransformOutcome]:
    """Turn each unit's XML report of one tool into HTML.

    A unit without an XML report is skipped: either the tool found nothing
    or it did not run for that unit, and both look the same here.
    The first failing transform stops processing and is re-raised with the
    tool and unit in its message.
    """
    outcomes: List[TransformOutcome] = []
    for unit in units:
        paths = report_paths(tool_config, unit)
        if not paths.xml_path.exists():
            outcomes.append(TransformOutcome(tool_config.tool_name, unit.name,
                                             paths.xml_path, paths.html_path, SKIPPED))
            continue
        try:
            transform(paths.xml_path, paths.html_path, tool_config.stylesheet_path, tool_config.reports_dir)
        except TransformError as e:
            raise TransformError(
                f"{tool_config.tool_name} post-processing failed for unit '{unit.name}': {e}",
                path=e.path,
            ) from e
        outcomes.append(TransformOutcome(tool_config.tool_name, unit.name,
                                         paths.xml_path, paths.html_path, TRANSFORMED))
    return outcomes
