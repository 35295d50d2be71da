from pathlib import Path
from typing import List

from qualitygate.models import BuildUnit

DEFAULT_UNITS = ("main", "test")


def iter_build_units(project_dir: str) -> List[BuildUnit]:
    """Source sets of a project: every src/<name> holding java/ or resources/.
    Projects without src/ get the conventional main and test units.
    """
    src = Path(project_dir) / "src"
    if not src.is_dir():
        return [BuildUnit(n) for n in DEFAULT_UNITS]
    units = []
    for d in sorted(src.iterdir()):
        if d.is_dir() and ((d / "java").is_dir() or (d / "resources").is_dir()):
            units.append(BuildUnit(d.name))
    return units


def count_java_files(project_dir: str, unit: BuildUnit) -> int:
    # package names such as out/ or build/ are ordinary source dirs here
    java_root = Path(project_dir) / "src" / unit.name / "java"
    if not java_root.is_dir():
        return 0
    return sum(1 for p in java_root.rglob("*.java") if p.is_file())
