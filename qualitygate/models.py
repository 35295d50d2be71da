from dataclasses import dataclass
from pathlib import Path

TRANSFORMED = "transformed"
SKIPPED = "skipped"


@dataclass(frozen=True)
class ToolConfig:
    tool_name: str
    stylesheet_path: Path
    reports_dir: Path


@dataclass(frozen=True)
class BuildUnit:
    name: str

    def task_name(self, tool_name: str) -> str:
        """Name of the analysis task for this unit, e.g. pmdMain."""
        return f"{tool_name}{self.name[:1].upper()}{self.name[1:]}"


@dataclass(frozen=True)
class ReportPaths:
    xml_path: Path
    html_path: Path


@dataclass(frozen=True)
class TransformOutcome:
    tool: str
    unit: str
    xml_path: Path
    html_path: Path
    status: str  # TRANSFORMED | SKIPPED


def report_paths(config: ToolConfig, unit: BuildUnit) -> ReportPaths:
    reports_dir = Path(config.reports_dir)
    return ReportPaths(
        xml_path=reports_dir / f"{unit.name}.xml",
        html_path=reports_dir / f"{unit.name}.html",
    )
