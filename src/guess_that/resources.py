import logging
from importlib.resources import files
from pathlib import Path
from typing import Optional

from guess_that.errors import ResourceNotFoundError

LOG = logging.getLogger(__name__)

PACKAGED_RESOURCES = "data"


def load_resource(filename: str, folder: str = "", base_dir: Optional[Path] = None) -> str:
    """Read a UTF-8 text resource.

    Looks in ``base_dir`` when given, otherwise in the resources shipped with
    the package. Raises ResourceNotFoundError if the file does not exist.
    """
    folder = folder.strip()
    filename = filename.strip()

    if base_dir is not None:
        resource = Path(base_dir)
    else:
        resource = files("guess_that") / PACKAGED_RESOURCES
    if folder:
        resource = resource / folder
    resource = resource / filename

    if not resource.is_file():
        raise ResourceNotFoundError(f"Resource '{resource}' not found")

    text = resource.read_text(encoding="utf-8")
    LOG.debug("Loaded resource %s (%d chars)", resource, len(text))
    return text
