import os
import stat
from pathlib import Path

import pytest

from qualitygate.errors import TransformError
from qualitygate.xslt import transform


def test_renders_html_report(stylesheet, reports_dir, write_report):
    xml = write_report("main")
    html = reports_dir / "main.html"

    out = transform(xml, html, stylesheet, reports_dir)

    assert out == html
    text = html.read_text(encoding="utf-8")
    assert "<h1>pmd report</h1>" in text
    assert "UnusedPrivateField: Avoid unused private fields such as 'name'." in text


def test_string_params_reach_stylesheet(stylesheet, reports_dir, write_report):
    xml = write_report("main")
    html = reports_dir / "main.html"

    transform(xml, html, stylesheet, reports_dir, reporttype="scalastyle")

    assert "<h1>scalastyle report</h1>" in html.read_text(encoding="utf-8")


def test_output_is_byte_identical_on_rerun(stylesheet, reports_dir, write_report):
    xml = write_report("main")
    html = reports_dir / "main.html"

    transform(xml, html, stylesheet, reports_dir)
    first = html.read_bytes()
    transform(xml, html, stylesheet, reports_dir)

    assert html.read_bytes() == first


def test_missing_stylesheet_fails_without_output(tmp_path, reports_dir, write_report):
    xml = write_report("main")
    html = reports_dir / "main.html"
    missing = tmp_path / "code-quality" / "pmd" / "nope.xsl"

    with pytest.raises(TransformError) as exc:
        transform(xml, html, missing, reports_dir)

    assert exc.value.path == missing
    assert not html.exists()
    assert sorted(p.name for p in reports_dir.iterdir()) == ["main.xml"]


def test_malformed_report_is_named_in_error(stylesheet, reports_dir, write_report):
    xml = write_report("main", "<pmd><file name='A.java'>")
    html = reports_dir / "main.html"

    with pytest.raises(TransformError) as exc:
        transform(xml, html, stylesheet, reports_dir)

    assert exc.value.path == xml
    assert str(xml) in str(exc.value)
    assert "not well-formed" in str(exc.value)
    assert not html.exists()


def test_invalid_stylesheet(tmp_path, reports_dir, write_report):
    xsl = tmp_path / "broken.xsl"
    xsl.write_text("<notxslt/>", encoding="utf-8")
    xml = write_report("main")

    with pytest.raises(TransformError) as exc:
        transform(xml, reports_dir / "main.html", xsl, reports_dir)

    assert exc.value.path == xsl


def test_failed_transform_keeps_previous_html(stylesheet, reports_dir, write_report):
    html = reports_dir / "main.html"
    html.write_text("<html>previous</html>", encoding="utf-8")
    xml = write_report("main", "not xml at all")

    with pytest.raises(TransformError):
        transform(xml, html, stylesheet, reports_dir)

    assert html.read_text(encoding="utf-8") == "<html>previous</html>"
    assert sorted(p.name for p in reports_dir.iterdir()) == ["main.html", "main.xml"]


def test_creates_destination_directory(stylesheet, tmp_path, write_report):
    xml = write_report("test")
    dest = tmp_path / "out" / "pmd"

    transform(xml, dest / "test.html", stylesheet, dest)

    assert (dest / "test.html").is_file()


def test_accepts_string_paths(stylesheet, reports_dir, write_report):
    xml = write_report("main")

    out = transform(str(xml), str(reports_dir / "main.html"), str(stylesheet), str(reports_dir))

    assert isinstance(out, Path)
    assert out.is_file()


@pytest.fixture
def umask_022():
    old = os.umask(0o022)
    yield
    os.umask(old)


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_new_report_gets_umask_mode(stylesheet, reports_dir, write_report, umask_022):
    xml = write_report("main")
    html = reports_dir / "main.html"

    transform(xml, html, stylesheet, reports_dir)

    assert stat.S_IMODE(html.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_rerun_keeps_existing_report_mode(stylesheet, reports_dir, write_report, umask_022):
    xml = write_report("main")
    html = reports_dir / "main.html"
    html.write_text("<html>old</html>", encoding="utf-8")
    os.chmod(html, 0o664)

    transform(xml, html, stylesheet, reports_dir)

    assert stat.S_IMODE(html.stat().st_mode) == 0o664
    assert "<html>old</html>" not in html.read_text(encoding="utf-8")
