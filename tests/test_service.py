import json
from pathlib import Path

import pytest

from sfc_markdown.config import FileMapping
from sfc_markdown.core import ConversionService
from sfc_markdown.errors import NotFoundError, SourceDirectoryError, WriteError


def test_convert_file_writes_markdown(tmp_path: Path, source_dir: Path, make_config) -> None:
    service = ConversionService(make_config())
    result = service.convert_file("quick-start.vue")
    assert result.ok
    assert result.output_path == tmp_path / "out" / "quick-start.md"
    text = result.output_path.read_text(encoding="utf-8")
    assert text.startswith(
        "---\ntitle: Quick Start\ndescription: Quick Start documentation for Base Framework.\n---\n\n# Quick Start\n"
    )
    assert "Create a project with the `base` CLI." in text
    assert "```bash\nbase new myapp\ncd myapp\n```" in text
    assert "- Fast\n- Small" in text
    assert "padding" not in text
    assert text.count("# Quick Start\n") == 1


def test_convert_file_flattens_components(tmp_path: Path, source_dir: Path, make_config) -> None:
    service = ConversionService(make_config())
    result = service.convert_file(FileMapping(source="router.vue", output="routing/index.md"))
    assert result.output_path == tmp_path / "out" / "routing" / "index.md"
    assert result.warnings == ["COMPONENTS_FLATTENED"]
    text = result.output_path.read_text(encoding="utf-8")
    assert "# Router\n\n## Routes\n\nRegister routes with [groups](/docs/router#groups)." in text
    assert "v-for" not in text


def test_convert_file_missing_source_raises(tmp_path: Path, source_dir: Path, make_config) -> None:
    service = ConversionService(make_config())
    with pytest.raises(NotFoundError):
        service.convert_file("missing.vue")
    assert not (tmp_path / "out" / "missing.md").exists()


def test_batch_reports_partial_success(tmp_path: Path, source_dir: Path, make_config) -> None:
    config = make_config(["quick-start.vue", "missing.vue", "router.vue"])
    service = ConversionService(config)
    seen: list[str] = []
    result = service.batch_convert(on_result=lambda item: seen.append(item.source_name))

    assert result.summary.total == 3
    assert result.summary.successes == 2
    assert result.summary.failures == 1
    assert [item.source_name for item in result.results] == ["quick-start.vue", "missing.vue", "router.vue"]
    assert seen == ["quick-start.vue", "missing.vue", "router.vue"]
    assert result.results[1].error_code == "NOT_FOUND"
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["quick-start.md", "router.md"]

    log_lines = (tmp_path / "runs" / "log.jsonl").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in log_lines]
    assert [entry["status"] for entry in entries] == ["success", "failure", "success"]
    assert all(entry["run_id"] == result.run_id for entry in entries)
    assert entries[1]["error_code"] == "NOT_FOUND"
    assert entries[1]["failed_stage"] == "read"
    assert entries[0]["failed_stage"] is None
    assert set(entries[0]["timings"]) == {"read_ms", "extract_ms", "transform_ms", "write_ms"}

    summary_rows = (tmp_path / "runs" / "summary.csv").read_text(encoding="utf-8").splitlines()
    assert summary_rows[0] == "batch_id,timestamp,total,successes,failures,warnings"
    assert summary_rows[1].startswith(result.run_id)
    assert len(summary_rows) == 2


def test_batch_failures_do_not_write_partial_output(tmp_path: Path, source_dir: Path, make_config) -> None:
    (source_dir / "broken.vue").write_text("<template><p>x</p></template><script>let a", encoding="utf-8")
    service = ConversionService(make_config(["broken.vue", "router.vue"]))
    result = service.batch_convert()
    assert [item.status for item in result.results] == ["failure", "success"]
    assert result.results[0].error_code == "EXTRACTION_FAILED"
    assert not (tmp_path / "out" / "broken.md").exists()


def test_batch_write_error_is_isolated(tmp_path: Path, source_dir: Path, make_config) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    service = ConversionService(make_config())
    result = service.batch_convert(output_dir=blocker)
    assert result.summary.failures == 2
    assert {item.error_code for item in result.results} == {"WRITE_FAILED"}


def test_batch_missing_source_directory_is_fatal(tmp_path: Path, make_config) -> None:
    service = ConversionService(make_config())
    with pytest.raises(SourceDirectoryError) as exc:
        service.batch_convert()
    assert exc.value.code == "SOURCE_DIR_MISSING"


def test_parallel_batch_keeps_configured_order(tmp_path: Path, source_dir: Path, make_config) -> None:
    names = []
    for index in range(6):
        name = f"page-{index}.vue"
        (source_dir / name).write_text(f"<template><p>Page {index}</p></template>", encoding="utf-8")
        names.append(name)
    service = ConversionService(make_config(names))
    result = service.batch_convert(parallelism=3)
    assert [item.source_name for item in result.results] == names
    assert result.summary.successes == 6
    assert (tmp_path / "out" / "page-4.md").read_text(encoding="utf-8").endswith("# Page 4\n\nPage 4\n")


def test_convert_text_is_pure(tmp_path: Path, make_config) -> None:
    service = ConversionService(make_config())
    converted = service.convert_text("<template><h1>Hello</h1><p>World</p></template>", "hello.vue")
    assert converted.document.body == "# Hello\n\nWorld"
    assert converted.warnings == []
    assert not (tmp_path / "out").exists()


def test_unwritable_run_log_does_not_stop_the_batch(tmp_path: Path, source_dir: Path, make_config) -> None:
    (tmp_path / "runs").write_text("not a directory", encoding="utf-8")
    service = ConversionService(make_config())
    result = service.batch_convert()
    assert result.summary.successes == 2
    assert all("RUN_LOG_FAILED" in item.warnings for item in result.results)
    assert result.summary.warnings["SUMMARY_WRITE_FAILED"] == 1
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == ["quick-start.md", "router.md"]


def test_output_path_that_is_a_directory_fails_cleanly(tmp_path: Path, source_dir: Path, make_config) -> None:
    (tmp_path / "out" / "quick-start.md").mkdir(parents=True)
    service = ConversionService(make_config())
    with pytest.raises(WriteError):
        service.convert_file("quick-start.vue")
    assert [path.name for path in (tmp_path / "out").iterdir()] == ["quick-start.md"]


def test_converting_output_again_keeps_fenced_markup(make_config) -> None:
    service = ConversionService(make_config())
    first = service.convert_text(
        '<template><h1>Card</h1><pre><code class="language-html">&lt;div class="card"&gt;Hi&lt;/div&gt;</code></pre></template>',
        "card.vue",
    )
    assert '```html\n<div class="card">Hi</div>\n```' in first.text
    second = service.convert_text(first.text, "card.vue")
    assert second.text == first.text
