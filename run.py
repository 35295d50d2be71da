import argparse
import sys
from pathlib import Path

from qualitygate.errors import TransformError
from qualitygate.fs import count_java_files, iter_build_units
from qualitygate.hooks import TaskHooks, apply_xslt_transformation
from qualitygate.models import TRANSFORMED, BuildUnit
from qualitygate.summary import write_csv, write_index
from qualitygate.tools import TOOL_IDS, QualitySettings


def _split(value: str):
    return [v.strip() for v in value.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Render static analysis XML reports (Checkstyle, PMD, FindBugs) as HTML")
    ap.add_argument("project", help="Path to the Java project")
    ap.add_argument("--root", default=None, help="Root project holding the code-quality directory (default: project)")
    ap.add_argument("--reports-root", default=None, help="Directory with one reports folder per tool (default: <project>/build/reports)")
    ap.add_argument("--tools", type=_split, default=list(TOOL_IDS), help="Comma separated tools to post-process")
    ap.add_argument("--units", type=_split, default=None, help="Comma separated source sets (default: discovered under src/)")
    ap.add_argument("--keep-going", action="store_true", help="Continue with remaining reports after a failed transform")
    ap.add_argument("--csv", action="store_true", help="Emit quality-summary.csv")
    ap.add_argument("--summary-dir", default=None, help="Where to write index.html (default: reports root)")
    ap.add_argument("--javac-args", action="store_true", help="Print the javac flags and exit")
    ap.add_argument("--print-settings", action="store_true", help="Print the compile and analysis tool settings and exit")
    ap.add_argument("--check-resources", action="store_true", help="Fail if rule files or stylesheets are missing")
    return ap


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    project = Path(args.project).resolve()
    settings = QualitySettings.for_project(
        project,
        root_dir=Path(args.root).resolve() if args.root else None,
        reports_root=Path(args.reports_root).resolve() if args.reports_root else None,
    )

    if args.javac_args:
        print(" ".join(settings.java.javac_args()))
        return 0

    if args.print_settings:
        for line in settings.describe():
            print(line)
        return 0

    try:
        configs = settings.tool_configs(args.tools)
    except ValueError as e:
        ap.error(str(e))

    if args.check_resources:
        missing = settings.missing_resources(args.tools)
        for p in missing:
            print(f"Missing code-quality resource: {p}", file=sys.stderr)
        if missing:
            return 1

    units = [BuildUnit(n) for n in args.units] if args.units else iter_build_units(str(project))
    # one post-processing task per unit, however often it was named
    units = list(dict.fromkeys(units))

    hooks = TaskHooks()
    tasks = []
    for config in configs:
        tool_units = settings.units_for(config.tool_name, units)
        apply_xslt_transformation(hooks, config, tool_units)
        tasks.extend((config.tool_name, u) for u in tool_units)

    # the analysis tasks already ran; signal each of them as finished
    outcomes = []
    failures = 0
    for tool, unit in tasks:
        try:
            for result in hooks.task_finished(unit.task_name(tool)):
                outcomes.extend(result)
        except TransformError as e:
            failures += 1
            print(f"ERROR: {e}", file=sys.stderr)
            if not args.keep_going:
                return 1

    for o in outcomes:
        if o.status == TRANSFORMED:
            print(f"{o.tool} [{o.unit}]: {o.html_path}")

    java_counts = {u.name: count_java_files(str(project), u) for u in units}
    summary_dir = Path(args.summary_dir).resolve() if args.summary_dir else settings.reports_base()
    index = write_index(summary_dir, outcomes, java_counts)
    if args.csv:
        write_csv(summary_dir, outcomes, java_counts)

    print(f"Build units: {len(units)}")
    print(f"Reports rendered: {sum(1 for o in outcomes if o.status == TRANSFORMED)}")
    print(f"Reports missing: {sum(1 for o in outcomes if o.status != TRANSFORMED)}")
    print(f"Summary (index): {index}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
