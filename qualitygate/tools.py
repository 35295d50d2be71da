from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from qualitygate.models import BuildUnit, ToolConfig

# Shared rule files and stylesheets live under <root>/code-quality
CODE_QUALITY_DIR = "code-quality"

JAVA_PLUGIN_ID = "java"
CHECKSTYLE_PLUGIN_ID = "checkstyle"
PMD_PLUGIN_ID = "pmd"
FINDBUGS_PLUGIN_ID = "findbugs"

TOOL_IDS = (CHECKSTYLE_PLUGIN_ID, PMD_PLUGIN_ID, FINDBUGS_PLUGIN_ID)

JAVA_VERSION = "1.8"
XLINT_ARGS = (
    "-Xlint:deprecation",
    "-Xlint:finally",
    "-Xlint:overrides",
    "-Xlint:path",
    "-Xlint:processing",
    "-Xlint:rawtypes",
    "-Xlint:varargs",
    "-Xlint:unchecked",
)


def tool_path(root_dir: Path, relative: str) -> Path:
    return Path(root_dir) / CODE_QUALITY_DIR / relative


def default_reports_dir(project_dir: Path, tool_name: str) -> Path:
    return Path(project_dir) / "build" / "reports" / tool_name


@dataclass(frozen=True)
class JavaCompileOptions:
    source_compatibility: str = JAVA_VERSION
    target_compatibility: str = JAVA_VERSION
    encoding: str = "UTF-8"
    compiler_args: Tuple[str, ...] = XLINT_ARGS

    def javac_args(self) -> List[str]:
        return [
            "-source", self.source_compatibility,
            "-target", self.target_compatibility,
            "-encoding", self.encoding,
            *self.compiler_args,
        ]


@dataclass(frozen=True)
class CheckstyleSettings:
    tool_version: str = "7.1"
    config: str = "checkstyle/checkstyle-rules.xml"
    suppressions_file: str = "checkstyle/checkstyle-suppressions.xml"
    stylesheet: str = "checkstyle/checkstyle-noframes-severity-sorted.xsl"
    ignore_failures: bool = True

    def config_properties(self, root_dir: Path) -> Dict[str, str]:
        return {"suppressionsFile": str(tool_path(root_dir, self.suppressions_file))}

    def resources(self) -> List[str]:
        return [self.config, self.suppressions_file, self.stylesheet]


@dataclass(frozen=True)
class PmdSettings:
    tool_version: str = "5.5.1"
    rule_set_files: Tuple[str, ...] = ("pmd/pmd-rules-general.xml", "pmd/pmd-rules-prod.xml")
    # the tool's own HTML is replaced by the XSLT output
    html_enabled: bool = False
    stylesheet: str = "pmd/pmd-nicerhtml.xsl"
    ignore_failures: bool = True

    def resources(self) -> List[str]:
        return [*self.rule_set_files, self.stylesheet]


@dataclass(frozen=True)
class FindbugsSettings:
    tool_version: str = "3.0.1"
    source_sets: Tuple[str, ...] = ("main", "test")
    exclude_filter: str = "findbugs/findbugs-exclude.xml"
    # FindBugs cannot emit XML and HTML together, so HTML comes from XSLT
    xml_enabled: bool = True
    xml_with_messages: bool = True
    html_enabled: bool = False
    stylesheet: str = "findbugs/default.xsl"
    ignore_failures: bool = True

    def resources(self) -> List[str]:
        return [self.exclude_filter, self.stylesheet]


@dataclass
class QualitySettings:
    """Compile options and analysis tool settings of one Java project."""

    project_dir: Path
    root_dir: Path
    reports_root: Optional[Path] = None
    java: JavaCompileOptions = field(default_factory=JavaCompileOptions)
    checkstyle: CheckstyleSettings = field(default_factory=CheckstyleSettings)
    pmd: PmdSettings = field(default_factory=PmdSettings)
    findbugs: FindbugsSettings = field(default_factory=FindbugsSettings)

    @classmethod
    def for_project(cls, project_dir: Path, root_dir: Optional[Path] = None,
                    reports_root: Optional[Path] = None) -> "QualitySettings":
        project_dir = Path(project_dir)
        return cls(
            project_dir=project_dir,
            root_dir=Path(root_dir) if root_dir is not None else project_dir,
            reports_root=Path(reports_root) if reports_root is not None else None,
        )

    def _tool(self, tool_name: str):
        try:
            return {
                CHECKSTYLE_PLUGIN_ID: self.checkstyle,
                PMD_PLUGIN_ID: self.pmd,
                FINDBUGS_PLUGIN_ID: self.findbugs,
            }[tool_name]
        except KeyError:
            raise ValueError(f"unknown analysis tool: {tool_name!r} (expected one of {', '.join(TOOL_IDS)})") from None

    def reports_base(self) -> Path:
        if self.reports_root is not None:
            return self.reports_root
        return Path(self.project_dir) / "build" / "reports"

    def reports_dir(self, tool_name: str) -> Path:
        if self.reports_root is not None:
            return self.reports_root / tool_name
        return default_reports_dir(self.project_dir, tool_name)

    def tool_config(self, tool_name: str) -> ToolConfig:
        settings = self._tool(tool_name)
        return ToolConfig(
            tool_name=tool_name,
            stylesheet_path=tool_path(self.root_dir, settings.stylesheet),
            reports_dir=self.reports_dir(tool_name),
        )

    def tool_configs(self, tool_names: Iterable[str] = TOOL_IDS) -> List[ToolConfig]:
        return [self.tool_config(t) for t in tool_names]

    def units_for(self, tool_name: str, units: Iterable[BuildUnit]) -> List[BuildUnit]:
        """FindBugs only analyses its configured source sets; the other tools see every unit."""
        units = list(units)
        if tool_name == FINDBUGS_PLUGIN_ID:
            return [u for u in units if u.name in self.findbugs.source_sets]
        self._tool(tool_name)
        return units

    def missing_resources(self, tool_names: Iterable[str] = TOOL_IDS) -> List[Path]:
        missing = []
        for t in tool_names:
            for rel in self._tool(t).resources():
                p = tool_path(self.root_dir, rel)
                if not p.is_file():
                    missing.append(p)
        return missing

    def describe(self) -> List[str]:
        """Effective compile and analysis settings, one line per entry."""
        def flag(v: bool) -> str:
            return "true" if v else "false"

        cs, pmd, fb = self.checkstyle, self.pmd, self.findbugs
        lines = [
            f"java: sourceCompatibility={self.java.source_compatibility} "
            f"targetCompatibility={self.java.target_compatibility} encoding={self.java.encoding}",
            f"java: compilerArgs={' '.join(self.java.compiler_args)}",
            f"checkstyle {cs.tool_version}: ignoreFailures={flag(cs.ignore_failures)}",
            f"checkstyle: config={tool_path(self.root_dir, cs.config)}",
        ]
        lines += [f"checkstyle: configProperties.{k}={v}" for k, v in cs.config_properties(self.root_dir).items()]
        lines += [
            f"pmd {pmd.tool_version}: ignoreFailures={flag(pmd.ignore_failures)} html={flag(pmd.html_enabled)}",
            f"pmd: ruleSetFiles={','.join(str(tool_path(self.root_dir, r)) for r in pmd.rule_set_files)}",
            f"findbugs {fb.tool_version}: ignoreFailures={flag(fb.ignore_failures)} "
            f"xml={flag(fb.xml_enabled)} xml.withMessages={flag(fb.xml_with_messages)} html={flag(fb.html_enabled)}",
            f"findbugs: sourceSets={','.join(fb.source_sets)} excludeFilter={tool_path(self.root_dir, fb.exclude_filter)}",
        ]
        for t in TOOL_IDS:
            c = self.tool_config(t)
            lines.append(f"{t}: stylesheet={c.stylesheet_path} reportsDir={c.reports_dir}")
        return lines
