"""Destination path computation for converted files."""
import logging
from pathlib import Path
from typing import Optional

from imageflip.conversion.exceptions import InvalidPathError

logger = logging.getLogger("imageflip.paths")


def ensure_directory(directory: Path) -> None:
    """Create directory (and parents). An existing directory is not an error."""
    directory.mkdir(parents=True, exist_ok=True)


def replace_extension(path: Path, extension: str) -> Path:
    if not path.name:
        raise InvalidPathError(path, "Source has no file name")
    try:
        return path.with_suffix(f".{extension}")
    except ValueError as e:
        raise InvalidPathError(path, f"Cannot apply extension '{extension}'") from e


def resolve_output_path(source: Path, output_root: Optional[Path], target_ext: str) -> Path:
    """
    Compute where the converted copy of ``source`` is written.
    - no output root: next to the source, extension replaced.
    - absolute output root: ``output_root/<name>``; the root is created if missing.
    - relative output root: resolved against the source's parent directory,
      not the working directory; that directory is created if missing.
    Raises InvalidPathError for sources without a file name or parent, and
    OSError if the directory cannot be created.
    """
    source = Path(source)
    if not source.name:
        raise InvalidPathError(source, "Source has no file name")
    if output_root is None:
        return replace_extension(source, target_ext)

    output_root = Path(output_root)
    if output_root.is_absolute():
        directory = output_root
    else:
        parent = source.parent
        if parent == source:
            raise InvalidPathError(source, "Source has no parent directory")
        directory = parent / output_root

    ensure_directory(directory)
    logger.debug("Output directory ready: %s", directory)
    return replace_extension(directory / source.name, target_ext)
