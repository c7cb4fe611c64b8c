"""
Gather the behaviors of a local repository.

A behavior is a directory under `<repo>/.behavior/`, the directory name is the behavior name.
Its lifecycle status is inferred from which standard files exist, eg. `0.wish.md`, `1.vision.md`.

PROMPT> python -m behaviordispatch.gather.gather_local_behaviors /path/to/repo

Save the basket as json, so it can be fed to the other stages:
PROMPT> python -m behaviordispatch.gather.gather_local_behaviors /path/to/repo gathered.json
"""
import hashlib
import logging
import re
from pathlib import Path
from behaviordispatch.domain.behavior import Behavior, BehaviorGathered, BehaviorGatheredStatus, GatheredFileRef

logger = logging.getLogger(__name__)

BEHAVIOR_ROOT_DIRNAME = ".behavior"

def enum_behavior_dirs(repo_dir: Path) -> list[Path]:
    """Subdirectories of `<repo>/.behavior/`, sorted by name. Empty when there is no such directory."""
    behavior_root = repo_dir / BEHAVIOR_ROOT_DIRNAME
    if not behavior_root.is_dir():
        return []
    return sorted((p for p in behavior_root.iterdir() if p.is_dir()), key=lambda p: p.name)

def compute_content_hash(behavior_dir: Path) -> str:
    """sha256 over the sorted relative paths and contents of all files, recursively."""
    files = sorted(
        (p for p in behavior_dir.rglob("*") if p.is_file()),
        key=lambda p: p.relative_to(behavior_dir).as_posix(),
    )
    sha = hashlib.sha256()
    for path in files:
        sha.update(path.relative_to(behavior_dir).as_posix().encode("utf-8"))
        sha.update(path.read_bytes())
    return sha.hexdigest()

def enum_behavior_file_refs(behavior_dir: Path) -> tuple[GatheredFileRef, ...]:
    # Feedback artifacts are not part of the behavior.
    paths = sorted(p for p in behavior_dir.iterdir() if p.is_file() and "[feedback]" not in p.name)
    return tuple(GatheredFileRef(uri=str(p)) for p in paths)

def infer_behavior_status(file_names: list[str]) -> BehaviorGatheredStatus:
    """Later lifecycle stages take precedence."""
    if any("delivered" in f for f in file_names):
        return BehaviorGatheredStatus.DELIVERED
    if any("execution" in f for f in file_names):
        return BehaviorGatheredStatus.INFLIGHT
    if any(".blueprint." in f for f in file_names):
        return BehaviorGatheredStatus.BLUEPRINTED
    if any(re.match(r"^2\.criteria(\.|$)", f) for f in file_names):
        return BehaviorGatheredStatus.CONSTRAINED
    if any(re.match(r"^1\.vision(\.|$)", f) for f in file_names):
        return BehaviorGatheredStatus.ENVISIONED
    return BehaviorGatheredStatus.WISHED

def parse_behavior_dir(behavior_dir: Path, org: str, repo: str) -> BehaviorGathered:
    files = enum_behavior_file_refs(behavior_dir)
    return BehaviorGathered(
        behavior=Behavior(org=org, repo=repo, name=behavior_dir.name),
        content_hash=compute_content_hash(behavior_dir),
        status=infer_behavior_status([f.file_name for f in files]),
        files=files,
    )

def gather_local_behaviors(repo_dir: Path, org: str, repo: str) -> list[BehaviorGathered]:
    if not isinstance(repo_dir, Path):
        raise ValueError(f"repo_dir must be a Path, got: {repo_dir!r}")
    behavior_dirs = enum_behavior_dirs(repo_dir)
    gathered = [parse_behavior_dir(d, org, repo) for d in behavior_dirs]
    logger.info(f"Gathered {len(gathered)} behaviors from {repo_dir}")
    return gathered

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    repo_dir = Path(sys.argv[1] if len(sys.argv) > 1 else ".").resolve()
    gathered = gather_local_behaviors(repo_dir, org="local", repo=repo_dir.name)
    for item in gathered:
        print(f"{item.behavior.name}: {item.status.value} {item.content_hash[:12]}")
    if len(sys.argv) > 2:
        from behaviordispatch.gather.basket_json import save_basket
        save_basket(gathered, Path(sys.argv[2]))
        print(f"Saved basket to {sys.argv[2]}")
