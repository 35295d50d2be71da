import os
from html import escape
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from qualitygate.models import TRANSFORMED, TransformOutcome

SUMMARY_COLUMNS = ["tool", "unit", "status", "xml", "html", "java_files"]


def _html_escape(s: str) -> str:
    return escape(s or "", quote=True)


def _style() -> str:
    return """
    <style>
      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 24px; }
      table { border-collapse: collapse; width: 100%; margin: 12px 0; }
      th, td { border: 1px solid #ddd; padding: 8px; }
      th { background: #f5f5f5; text-align: left; }
      tr:nth-child(even) { background: #fafafa; }
      .muted { color: #666; font-size: 0.9em; }
      a { color: #0b6bcb; text-decoration: none; }
      a:hover { text-decoration: underline; }
      .mono { font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace; }
    </style>
    """


def _header(title: str, subtitle: str = "") -> str:
    sub = f"<p class='muted'>{_html_escape(subtitle)}</p>" if subtitle else ""
    return f"<head><meta charset='utf-8'><title>{_html_escape(title)}</title>{_style()}</head><body><h1>{_html_escape(title)}</h1>{sub}"


def _footer() -> str:
    return "</body>"


def _write_html(path: Path, html: str) -> None:
    path.write_text(html, encoding="utf-8")


def outcomes_frame(outcomes: List[TransformOutcome], java_counts: Optional[Dict[str, int]] = None) -> pd.DataFrame:
    if not outcomes:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    java_counts = java_counts or {}
    return pd.DataFrame([
        {
            "tool": o.tool,
            "unit": o.unit,
            "status": o.status,
            "xml": str(o.xml_path),
            "html": str(o.html_path) if o.status == TRANSFORMED else "",
            "java_files": java_counts.get(o.unit, 0),
        }
        for o in outcomes
    ], columns=SUMMARY_COLUMNS)


def write_csv(out_dir: Path, outcomes: List[TransformOutcome], java_counts: Optional[Dict[str, int]] = None) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / "quality-summary.csv"
    outcomes_frame(outcomes, java_counts).to_csv(path, index=False)
    return path


def _link(out_dir: Path, html: str) -> str:
    try:
        return Path(os.path.relpath(html, out_dir)).as_posix()
    except ValueError:  # different drive on Windows
        return Path(html).as_uri()


def write_index(out_dir: Path, outcomes: List[TransformOutcome], java_counts: Optional[Dict[str, int]] = None) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    df = outcomes_frame(outcomes, java_counts)

    transformed = int((df["status"] == TRANSFORMED).sum()) if not df.empty else 0
    html = [_header("Code Quality Reports", f"{transformed} of {len(df)} reports rendered")]
    if df.empty:
        html.append("<p class='muted'>No analysis tools were run.</p>")
    else:
        for tool, dft in df.groupby("tool", sort=False):
            html.append(f"<h2>{_html_escape(tool)}</h2>")
            rows = ["<table><tr><th>Unit</th><th>Java files</th><th>Report</th></tr>"]
            for _, r in dft.iterrows():
                if r["status"] == TRANSFORMED:
                    cell = f"<a href='{_html_escape(_link(out_dir, r['html']))}'><span class='mono'>{_html_escape(Path(r['html']).name)}</span></a>"
                else:
                    cell = "<span class='muted'>no report</span>"
                rows.append(
                    f"<tr><td><span class='mono'>{_html_escape(r['unit'])}</span></td>"
                    f"<td>{int(r['java_files'] or 0)}</td>"
                    f"<td>{cell}</td></tr>"
                )
            rows.append("</table>")
            html.append("\n".join(rows))
    html.append(_footer())

    path = out_dir / "index.html"
    _write_html(path, "\n".join(html))
    return path
