import os
import stat
import tempfile
from pathlib import Path
from typing import Union

import lxml.etree as ET

from qualitygate.errors import TransformError

PathLike = Union[str, Path]


def _parse(path: Path, what: str):
    if not path.is_file():
        raise TransformError(f"{what} {path} not found", path=path)
    try:
        return ET.parse(str(path))
    except ET.XMLSyntaxError as e:
        raise TransformError(f"{what} {path} is not well-formed XML: {e}", path=path) from e
    except OSError as e:
        raise TransformError(f"cannot read {what} {path}: {e}", path=path) from e


def _load_stylesheet(stylesheet: Path) -> ET.XSLT:
    xsl_doc = _parse(stylesheet, "XSL stylesheet")
    try:
        return ET.XSLT(xsl_doc)
    except ET.XSLTParseError as e:
        raise TransformError(f"XSL stylesheet {stylesheet} is invalid: {e}", path=stylesheet) from e


def _report_mode(output: Path) -> int:
    if output.exists():
        return stat.S_IMODE(output.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _write_atomically(output: Path, data: bytes) -> None:
    # temp file next to the target so os.replace stays on one filesystem
    fd, tmp_name = tempfile.mkstemp(prefix=f".{output.name}.", suffix=".tmp", dir=str(output.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        # mkstemp creates 0600; give the report the mode a plain open() would
        os.chmod(tmp_name, _report_mode(output))
        os.replace(tmp_name, output)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def transform(input: PathLike, output: PathLike, stylesheet: PathLike, dest_dir: PathLike, **params: str) -> Path:
    """Apply an XSL stylesheet to an XML report and write the result to output.

    String ``params`` are passed to the stylesheet as XSLT parameters. The
    output file is only replaced once the whole document has been rendered,
    so a failed transform never leaves a partial report behind.
    """
    input, output, stylesheet, dest_dir = Path(input), Path(output), Path(stylesheet), Path(dest_dir)

    xslt = _load_stylesheet(stylesheet)
    xml_doc = _parse(input, "XML report")

    try:
        result = xslt(xml_doc, **{k: ET.XSLT.strparam(v) for k, v in params.items()})
    except ET.XSLTApplyError as e:
        raise TransformError(f"applying {stylesheet.name} to {input} failed: {e}", path=input) from e

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        output.parent.mkdir(parents=True, exist_ok=True)
        _write_atomically(output, bytes(result))
    except OSError as e:
        raise TransformError(f"cannot write {output}: {e}", path=output) from e
    return output
