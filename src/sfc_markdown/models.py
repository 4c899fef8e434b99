"""Result models for component-to-Markdown conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .frontmatter import MarkdownDocument
from .logging import BatchSummary


@dataclass(frozen=True, slots=True)
class ConvertedDocument:
    """A rendered document plus the warnings raised while producing it."""

    document: MarkdownDocument
    warnings: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.document.text


@dataclass(slots=True)
class ConversionResult:
    """Outcome of converting one configured file."""

    source_name: str
    status: Literal["success", "failure"]
    output_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
    error_code: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass(slots=True)
class BatchConversionResult:
    """Aggregate results for a batch run, in configured file order."""

    run_id: str
    results: list[ConversionResult]
    summary: BatchSummary

    @property
    def succeeded(self) -> list[ConversionResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> list[ConversionResult]:
        return [result for result in self.results if not result.ok]


__all__ = [
    "BatchConversionResult",
    "ConversionResult",
    "ConvertedDocument",
]
