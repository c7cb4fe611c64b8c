"""
Write an output file, keeping the previous version when the content changes.

The previous version goes to a ".archive" dir next to the file, prefixed with a timestamp.
Writing identical content is a no-op, so rerunning the pipeline doesn't pile up archives.

PROMPT> python -m behaviordispatch.archive.output_archiver
"""
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from pathlib import Path
import shutil
from typing import Optional

logger = logging.getLogger(__name__)

ARCHIVE_DIR_NAME = ".archive"

@dataclass(frozen=True)
class ArchiveResult:
    archived: bool
    archive_path: Optional[Path] = None

def archive_timestamp() -> str:
    """ISO timestamp that is safe to use in a filename, eg. '2026-10-19T08-30-00-123456+00-00'."""
    return datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")

def write_if_changed(path: Path, new_content: str) -> ArchiveResult:
    if not isinstance(path, Path):
        raise ValueError(f"Expected path to be a Path, but got {type(path)}")
    if not isinstance(new_content, str):
        raise ValueError(f"Expected new_content to be a str, but got {type(new_content)}")

    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        prior_content: Optional[str] = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        prior_content = None

    if prior_content == new_content:
        logger.debug(f"Unchanged, not writing: {path}")
        return ArchiveResult(archived=False)

    archive_path: Optional[Path] = None
    if prior_content is not None:
        archive_dir = path.parent / ARCHIVE_DIR_NAME
        archive_dir.mkdir(parents=True, exist_ok=True)
        archive_path = archive_dir / f"{archive_timestamp()}.{path.name}"
        shutil.copy2(path, archive_path)
        logger.info(f"Archived previous version of {path.name} to {archive_path}")

    path.write_text(new_content, encoding="utf-8")
    return ArchiveResult(archived=archive_path is not None, archive_path=archive_path)

if __name__ == "__main__":
    import tempfile

    logging.basicConfig(level=logging.DEBUG)
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "prioritization.md"
        print(write_if_changed(path, "# first"))
        print(write_if_changed(path, "# first"))
        print(write_if_changed(path, "# second"))
