from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from .config import AppConfig, FileMapping
from .directives import StripReport
from .errors import ConversionError, SourceDirectoryError, WriteError
from .extraction import extract_markup
from .frontmatter import compose_document
from .loader import load_source
from .logging import BatchSummary, RunLogEntry, RunLogger, StageTimings, append_summary_row
from .models import BatchConversionResult, ConversionResult, ConvertedDocument
from .render import transform
from .utils import atomic_write, generate_run_id

ResultCallback = Callable[[ConversionResult], None]


@dataclass(slots=True)
class _ConversionContext:
    run_id: str
    logger: RunLogger
    source_dir: Path
    output_dir: Path


def _warnings_for(report: StripReport, markdown: str) -> list[str]:
    warnings: list[str] = []
    if report.flattened:
        warnings.append("COMPONENTS_FLATTENED")
    if not markdown.strip():
        warnings.append("EMPTY_TEMPLATE")
    return warnings


def _as_mapping(item: FileMapping | str) -> FileMapping:
    if isinstance(item, FileMapping):
        return item
    return FileMapping.for_source(item)


class ConversionService:
    def __init__(self, config: AppConfig) -> None:
        self._config = config

    @property
    def config(self) -> AppConfig:
        return self._config

    def convert_text(self, text: str, filename: str) -> ConvertedDocument:
        """Run extraction, transformation and composition on in-memory text."""

        transformed = transform(extract_markup(text))
        document = compose_document(transformed.markdown, filename, self._config.site.product_name)
        return ConvertedDocument(document=document, warnings=_warnings_for(transformed.report, transformed.markdown))

    def convert_file(
        self,
        item: FileMapping | str,
        *,
        run_id: str | None = None,
        source_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> ConversionResult:
        mapping = _as_mapping(item)
        context = self._build_context(run_id or generate_run_id(), source_dir, output_dir)
        result, error = self._attempt(mapping, context)
        if error is not None:
            raise error
        return result

    def _build_context(self, run_id: str, source_dir: Path | None, output_dir: Path | None) -> _ConversionContext:
        runtime = self._config.runtime
        return _ConversionContext(
            run_id=run_id,
            logger=RunLogger(runtime.log_path),
            source_dir=source_dir or runtime.source_dir,
            output_dir=output_dir or runtime.output_dir,
        )

    def _attempt(
        self, mapping: FileMapping, context: _ConversionContext
    ) -> tuple[ConversionResult, ConversionError | None]:
        timings = StageTimings()
        try:
            result, size_bytes = self._convert_internal(mapping, context, timings)
        except ConversionError as exc:
            result = ConversionResult(
                source_name=mapping.source,
                status="failure",
                error_code=exc.code,
                error_message=str(exc),
            )
            self._record(context, result, self._failure_entry(mapping, context, timings, exc))
            return result, exc
        self._record(context, result, self._success_entry(mapping, context, timings, result, size_bytes))
        return result, None

    def _record(self, context: _ConversionContext, result: ConversionResult, entry: RunLogEntry) -> None:
        # The converted file stands even when the run log cannot be written.
        try:
            context.logger.append(entry)
        except OSError:
            result.warnings.append("RUN_LOG_FAILED")

    def _convert_internal(
        self, mapping: FileMapping, context: _ConversionContext, timings: StageTimings
    ) -> tuple[ConversionResult, int]:
        with timings.measure("read"):
            source = load_source(context.source_dir, mapping.source)
        with timings.measure("extract"):
            markup = extract_markup(source.text)
        with timings.measure("transform"):
            transformed = transform(markup)
            document = compose_document(transformed.markdown, mapping.source, self._config.site.product_name)

        output_path = context.output_dir / mapping.output
        with timings.measure("write"):
            self._write_output(output_path, document.text)

        result = ConversionResult(
            source_name=mapping.source,
            status="success",
            output_path=output_path,
            warnings=_warnings_for(transformed.report, transformed.markdown),
        )
        return result, source.size_bytes

    def _write_output(self, output_path: Path, text: str) -> None:
        try:
            atomic_write(output_path, text)
        except OSError as exc:
            raise WriteError(f"Unable to write {output_path}: {exc.strerror or exc}") from exc

    def _success_entry(
        self,
        mapping: FileMapping,
        context: _ConversionContext,
        timings: StageTimings,
        result: ConversionResult,
        size_bytes: int,
    ) -> RunLogEntry:
        return RunLogEntry(
            run_id=context.run_id,
            source=str(context.source_dir / mapping.source),
            status="success",
            timings=timings,
            warnings=list(result.warnings),
            output_path=str(result.output_path),
            size_bytes=size_bytes,
        )

    def _failure_entry(
        self,
        mapping: FileMapping,
        context: _ConversionContext,
        timings: StageTimings,
        exc: ConversionError,
    ) -> RunLogEntry:
        return RunLogEntry(
            run_id=context.run_id,
            source=str(context.source_dir / mapping.source),
            status="failure",
            timings=timings,
            error_code=exc.code,
            error_message=str(exc),
        )

    def batch_convert(
        self,
        files: Sequence[FileMapping | str] | None = None,
        *,
        parallelism: int | None = None,
        source_dir: Path | None = None,
        output_dir: Path | None = None,
        on_result: ResultCallback | None = None,
    ) -> BatchConversionResult:
        mappings = [_as_mapping(item) for item in (self._config.files if files is None else files)]
        context = self._build_context(generate_run_id("batch"), source_dir, output_dir)
        if not context.source_dir.is_dir():
            raise SourceDirectoryError(f"Source directory does not exist: {context.source_dir}")
        callback = on_result or (lambda _: None)
        parallelism = max(1, parallelism or self._config.runtime.parallelism)
        summary = BatchSummary(total=len(mappings))

        if parallelism == 1 or len(mappings) < 2:
            results = self._run_sequential_batch(mappings, context, callback)
        else:
            results = self._run_parallel_batch(mappings, context, callback, parallelism)

        for result in results:
            summary.record(result.ok, result.warnings)
        if mappings:
            try:
                append_summary_row(self._config.runtime.summary_path, context.run_id, summary)
            except OSError:
                summary.record_warning("SUMMARY_WRITE_FAILED")
        return BatchConversionResult(run_id=context.run_id, results=results, summary=summary)

    def _convert_guarded(self, mapping: FileMapping, context: _ConversionContext) -> ConversionResult:
        result, _ = self._attempt(mapping, context)
        return result

    def _run_sequential_batch(
        self, mappings: Sequence[FileMapping], context: _ConversionContext, callback: ResultCallback
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        for mapping in mappings:
            result = self._convert_guarded(mapping, context)
            callback(result)
            results.append(result)
        return results

    def _run_parallel_batch(
        self,
        mappings: Sequence[FileMapping],
        context: _ConversionContext,
        callback: ResultCallback,
        parallelism: int,
    ) -> list[ConversionResult]:
        ordered: dict[int, ConversionResult] = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
            future_map = {
                executor.submit(self._convert_guarded, mapping, context): index
                for index, mapping in enumerate(mappings)
            }
            for future in concurrent.futures.as_completed(future_map):
                result = future.result()
                callback(result)
                ordered[future_map[future]] = result
        return [ordered[index] for index in range(len(mappings))]


__all__ = [
    "BatchConversionResult",
    "ConversionError",
    "ConversionResult",
    "ConversionService",
]
