"""Select the files of a directory that are eligible for conversion."""
import logging
from pathlib import Path
from typing import Optional

from imageflip.conversion.exceptions import StartupError
from imageflip.conversion.formats import is_image_extension

logger = logging.getLogger("imageflip.selection")


def file_extension(path: Path) -> Optional[str]:
    """Final suffix without the dot, or None when the name has no extension."""
    suffix = path.suffix
    return suffix[1:] if suffix else None


def _list_files(directory: Path) -> list[Path]:
    # Snapshot: files created or removed after this point are not observed.
    entries = sorted(Path(directory).iterdir())
    return [p for p in entries if p.is_file()]


def select_by_extension(directory: Path, from_ext: str) -> list[Path]:
    """Regular files in ``directory`` whose extension is exactly ``from_ext``.

    ``from_ext`` is a literal match; no image-format validation is applied.
    Raises OSError if the directory cannot be listed.
    """
    candidates = [p for p in _list_files(directory) if file_extension(p) == from_ext]
    logger.debug("Selected %s .%s file(s) in %s", len(candidates), from_ext, directory)
    return candidates


def warn_shared_stems(candidates: list[Path], to_ext: str) -> dict[str, list[Path]]:
    """Log candidates that would be written to the same destination file."""
    by_stem: dict[str, list[Path]] = {}
    for path in candidates:
        by_stem.setdefault(path.stem, []).append(path)
    clashes = {stem: paths for stem, paths in by_stem.items() if len(paths) > 1}
    for stem, paths in clashes.items():
        logger.warning(
            "%s all convert to %s.%s; the last one written wins",
            ", ".join(p.name for p in paths),
            stem,
            to_ext,
        )
    return clashes


def select_convertible(directory: Path, to_ext: str) -> list[Path]:
    """Regular image files in ``directory`` not already carrying ``to_ext``."""
    candidates = []
    for path in _list_files(directory):
        ext = file_extension(path)
        if ext != to_ext and is_image_extension(ext):
            candidates.append(path)
    logger.debug("Selected %s image(s) not in .%s in %s", len(candidates), to_ext, directory)
    warn_shared_stems(candidates, to_ext)
    return candidates


def select_candidates(
    directory: Path,
    to_ext: str,
    from_ext: Optional[str] = None,
    convert_all: bool = False,
) -> list[Path]:
    """Pick the selection policy: ``convert_all`` wins over ``from_ext``."""
    if convert_all:
        return select_convertible(directory, to_ext)
    if from_ext is None:
        raise StartupError("Expecting --from argument specifying extensions to convert from")
    return select_by_extension(directory, from_ext)
