import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

EXTENSIONS = {'.ts', '.tsx'}
LANGUAGES = {'.ts': 'ts', '.tsx': 'tsx'}
DEFAULT_OUTPUT = "src-catalog.md"
TITLE = "# Source Catalog (TypeScript)"
TREE_HEADING = "## Directory structure (src)"
FILES_HEADING = "## Files"

FENCE_CHAR = "`"
MIN_FENCE = 3

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "

PathLike = Union[str, os.PathLike]


def is_hidden(name: str) -> bool:
    return name.startswith('.')

def is_accepted(name: str) -> bool:
    return Path(name).suffix in EXTENSIONS

def _is_walkable_dir(entry: os.DirEntry) -> bool:
    # Symlinked directories are never descended into.
    return entry.is_dir(follow_symlinks=False)

def collect_files(root: PathLike) -> List[Path]:
    """Depth-first list of accepted files under ``root``, skipping hidden entries.

    Paths come back absolute and in discovery order; use :func:`sort_files`
    for the catalog order.
    """
    acc: List[Path] = []

    def walk(directory: Path) -> None:
        with os.scandir(directory) as it:
            entries = list(it)
        for entry in entries:
            if is_hidden(entry.name):
                continue
            full = directory / entry.name
            if _is_walkable_dir(entry):
                walk(full)
            elif not entry.is_dir() and is_accepted(entry.name):
                acc.append(full)

    walk(Path(root).absolute())
    logger.debug("Collected %d files under %s", len(acc), root)
    return acc

def sort_files(paths: Iterable[Path]) -> List[Path]:
    return sorted(paths, key=lambda p: Path(p).as_posix())

def _tree_entries(directory: Path) -> List[os.DirEntry]:
    with os.scandir(directory) as it:
        entries = [
            e for e in it
            if not is_hidden(e.name) and (e.is_dir() or is_accepted(e.name))
        ]
    dirs = sorted((e for e in entries if e.is_dir()), key=lambda e: e.name)
    files = sorted((e for e in entries if not e.is_dir()), key=lambda e: e.name)
    return dirs + files

def build_tree(directory: PathLike, prefix: str = "") -> List[str]:
    lines = []
    entries = _tree_entries(Path(directory))
    for i, entry in enumerate(entries):
        last = i == len(entries) - 1
        is_dir = entry.is_dir()
        name = entry.name + ("/" if is_dir else "")
        lines.append(prefix + (LAST_BRANCH if last else BRANCH) + name)
        if is_dir and _is_walkable_dir(entry):
            lines.extend(build_tree(Path(directory) / entry.name, prefix + (SPACE_PREFIX if last else PIPE_PREFIX)))
    return lines

def render_tree(directory: PathLike) -> str:
    return "\n".join(build_tree(directory))

def pick_fence(content: str) -> str:
    runs = re.findall(re.escape(FENCE_CHAR) + '+', content)
    max_run = max((len(run) for run in runs), default=0)
    return FENCE_CHAR * max(MIN_FENCE, max_run + 1)

def to_posix(path: PathLike, root: PathLike) -> str:
    return Path(os.path.relpath(path, root)).as_posix()

def language_for(path: PathLike) -> str:
    return LANGUAGES.get(Path(path).suffix, 'ts')

def read_source(path: PathLike) -> str:
    with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
        return f.read()

def timestamp(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')

def format_file_section(rel_path: str, content: str, language: str) -> str:
    fence = pick_fence(content)
    return f"### {rel_path}\n\n{fence} {language}\n{content}\n{fence}\n\n"

def create_markdown_document(root: PathLike, generated_at: Optional[datetime] = None) -> Tuple[str, int]:
    """Build the full catalog text for ``root``.

    Returns the document and the number of files it contains. Nothing is
    written; see :func:`write_catalog`.
    """
    root = Path(root).absolute()
    files = sort_files(collect_files(root))
    tree = render_tree(root)

    markdown_content = [
        f"{TITLE}\n\n",
        f"Generated on {timestamp(generated_at)}\n\n",
        f"{TREE_HEADING}\n\n",
        f"```\n{tree}\n```\n\n",
        f"{FILES_HEADING}\n\n",
    ]
    markdown_content.extend(
        format_file_section(to_posix(path, root), read_source(path), language_for(path))
        for path in files
    )
    return "".join(markdown_content), len(files)

def write_catalog(root: PathLike, output: PathLike = DEFAULT_OUTPUT,
                  generated_at: Optional[datetime] = None) -> int:
    root = Path(root).absolute()
    if not root.exists():
        raise FileNotFoundError(f"No source directory found at: {root}")

    text, count = create_markdown_document(root, generated_at)
    destination = root / output
    # Single write of the fully buffered document.
    with open(destination, 'w', encoding='utf-8', newline='') as f:
        f.write(text)
    logger.debug("Wrote %d files to %s", count, destination)
    return count

_HEADING_RE = re.compile(r'^### (.+)$')
_OPEN_FENCE_RE = re.compile(r'^(' + re.escape(FENCE_CHAR) + r'{3,}) ?(\S*)$')

def markdown_to_files(markdown_text: str) -> List[Dict[str, str]]:
    """Recover ``{"filepath", "language", "content"}`` records from a catalog."""
    files = []
    lines = markdown_text.split("\n")
    try:
        start = lines.index(FILES_HEADING) + 1
    except ValueError:
        start = 0

    current_filename: Optional[str] = None
    i = start
    while i < len(lines):
        line = lines[i]
        heading = _HEADING_RE.match(line)
        if heading:
            current_filename = heading.group(1).strip()
            i += 1
            continue
        opening = _OPEN_FENCE_RE.match(line) if current_filename else None
        if opening:
            fence, language = opening.group(1), opening.group(2)
            try:
                end = lines.index(fence, i + 1)
            except ValueError:
                raise ValueError(f"Unterminated code block for {current_filename}") from None
            files.append({
                "filepath": current_filename,
                "language": language,
                "content": "\n".join(lines[i + 1:end]),
            })
            current_filename = None
            i = end + 1
            continue
        i += 1

    if not files:
        raise ValueError("No files found in the markdown document.")
    return files
