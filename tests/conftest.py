from pathlib import Path

import pytest

from qualitygate.models import ToolConfig

PMD_XSL = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="html" encoding="UTF-8"/>
  <xsl:param name="reporttype" select="'pmd'"/>
  <xsl:template match="/pmd">
    <html>
      <body>
        <h1><xsl:value-of select="$reporttype"/> report</h1>
        <ul>
          <xsl:for-each select="file/violation">
            <li><xsl:value-of select="@rule"/>: <xsl:value-of select="normalize-space(.)"/></li>
          </xsl:for-each>
        </ul>
      </body>
    </html>
  </xsl:template>
</xsl:stylesheet>
"""

PMD_XML = """<?xml version="1.0" encoding="UTF-8"?>
<pmd version="5.5.1">
  <file name="src/main/java/org/example/Owner.java">
    <violation beginline="12" rule="UnusedPrivateField" priority="3">
      Avoid unused private fields such as 'name'.
    </violation>
  </file>
</pmd>
"""


@pytest.fixture
def stylesheet(tmp_path: Path) -> Path:
    p = tmp_path / "code-quality" / "pmd" / "pmd-nicerhtml.xsl"
    p.parent.mkdir(parents=True)
    p.write_text(PMD_XSL, encoding="utf-8")
    return p


@pytest.fixture
def reports_dir(tmp_path: Path) -> Path:
    d = tmp_path / "build" / "reports" / "pmd"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def pmd_config(stylesheet: Path, reports_dir: Path) -> ToolConfig:
    return ToolConfig(tool_name="pmd", stylesheet_path=stylesheet, reports_dir=reports_dir)


@pytest.fixture
def write_report(reports_dir: Path):
    def _write(unit: str, content: str = PMD_XML) -> Path:
        p = reports_dir / f"{unit}.xml"
        p.write_text(content, encoding="utf-8")
        return p
    return _write


@pytest.fixture
def pmd_xsl_source() -> str:
    return PMD_XSL


@pytest.fixture
def pmd_xml_source() -> str:
    return PMD_XML
