from typing import Any, Callable, Dict, Iterable, List

from qualitygate import xslt
from qualitygate.dispatch import Transform, run_post_processing
from qualitygate.models import BuildUnit, ToolConfig


class TaskHooks:
    """Callbacks to run once a named analysis task has finished."""

    def __init__(self):
        self._callbacks: Dict[str, List[Callable[[], Any]]] = {}

    def register(self, task_name: str, callback: Callable[[], Any]) -> None:
        self._callbacks.setdefault(task_name, []).append(callback)

    def task_names(self) -> List[str]:
        return list(self._callbacks)

    def task_finished(self, task_name: str) -> List[Any]:
        return [cb() for cb in self._callbacks.get(task_name, [])]


def apply_xslt_transformation(hooks: TaskHooks, tool_config: ToolConfig, units: Iterable[BuildUnit],
                              transform: Transform = xslt.transform) -> None:
    """Run the HTML post-processing of every unit after its analysis task, e.g. pmdMain."""
    for unit in units:
        def post_process(unit=unit):
            return run_post_processing(tool_config, [unit], transform)
        hooks.register(unit.task_name(tool_config.tool_name), post_process)
