from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ExtractionError, NotFoundError


@dataclass(frozen=True, slots=True)
class SourceDocument:
    name: str
    path: Path
    text: str

    @property
    def size_bytes(self) -> int:
        return len(self.text.encode("utf-8"))


def load_source(source_dir: Path, name: str) -> SourceDocument:
    path = source_dir / name
    if not path.is_file():
        raise NotFoundError(f"Source file does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractionError(f"Source file is not valid UTF-8: {path}") from exc
    except OSError as exc:
        raise NotFoundError(f"Unable to read source file {path}: {exc.strerror or exc}") from exc
    return SourceDocument(name=name, path=path, text=text)
