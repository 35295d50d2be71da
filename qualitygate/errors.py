from pathlib import Path
from typing import Optional, Union


class QualityGateError(Exception):
    pass


class TransformError(QualityGateError):
    """XSLT post-processing of a report failed.

    ``path`` names the file at fault (input XML, stylesheet or output) when known.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None
