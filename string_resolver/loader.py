"""Content directory loading."""

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import xxhash
from tqdm import tqdm

from .errors import ContentLoadError
from .models import EntryDocument

logger = logging.getLogger(__name__)


@dataclass
class DocumentInfo:
    """A content file, its fingerprint and its parsed document."""
    path: str
    hash: str
    document: EntryDocument


class LoadError:
    """Record of a content file that failed to load."""

    def __init__(self, path: str, error: str):
        self.path = path
        self.error = error


def compute_content_hash(payload: Any) -> str:
    """Fingerprint a JSON-compatible value using xxhash over its canonical form."""
    # ASCII escapes keep lone surrogates encodable
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return xxhash.xxh64(canonical.encode("ascii")).hexdigest()


def load_document(path: Path) -> DocumentInfo:
    """Read and parse one content file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("content document must be a JSON object")
    try:
        document = EntryDocument.from_dict(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed content document: {e!r}") from e
    return DocumentInfo(path=str(path), hash=compute_content_hash(data), document=document)


def list_content_files(folder_path: Path) -> list[Path]:
    """List the JSON files directly inside a content directory, sorted by name."""
    return sorted(
        folder_path / name
        for name in os.listdir(folder_path)
        if name.endswith(".json") and (folder_path / name).is_file()
    )


def scan_content(
    folder_path: Path,
    desc: str = "Loading",
    on_error: str = "fail",
    progress: bool = True
) -> tuple[list[DocumentInfo], list[LoadError]]:
    """
    Load every JSON document in a content directory.

    Args:
        folder_path: Directory holding the content files
        desc: Description for the progress bar
        on_error: How to handle errors - "skip" to continue, "fail" to raise
        progress: Show a progress bar

    Returns:
        Tuple of (loaded documents, list of load errors)
    """
    documents = []
    errors = []
    seen: dict[str, str] = {}

    with tqdm(list_content_files(folder_path), desc=desc, unit="file", disable=not progress) as pbar:
        for path in pbar:
            try:
                info = load_document(path)
            except (OSError, ValueError) as e:
                errors.append(LoadError(str(path), str(e)))

                if on_error == "fail":
                    print(f"\nError loading file: {path}", file=sys.stderr)
                    raise ContentLoadError(str(path), str(e)) from e
                continue

            logger.debug("Loaded %s (%s)", info.path, info.hash)
            if info.hash in seen:
                logger.warning("%s has the same content as %s", info.path, seen[info.hash])
            seen.setdefault(info.hash, info.path)
            documents.append(info)

    return documents, errors


def load_documents(folder_path: Path, progress: bool = False) -> list[EntryDocument]:
    """Load the documents of a content directory, failing on the first bad file."""
    documents, _ = scan_content(folder_path, progress=progress)
    return [info.document for info in documents]
