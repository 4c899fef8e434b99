from __future__ import annotations

from pathlib import Path

import pytest

from sfc_markdown.config import AppConfig, FileMapping, RuntimeConfig


QUICK_START = """<template>
  <div class="docs-page">
    <h1>Quick Start</h1>
    <p>Create a project with the <code>base</code> CLI.</p>
    <pre><code class="language-bash">base new myapp
cd myapp</code></pre>
    <ul>
      <li>Fast</li>
      <li>Small</li>
    </ul>
  </div>
</template>

<script setup>
const title = 'Quick Start'
</script>

<style scoped>
.docs-page { padding: 1rem; }
</style>
"""

ROUTER = """<template>
  <section>
    <h2 v-if="ready">Routes</h2>
    <RouteCard :route="r" v-for="r in routes" @click="open(r)">
      <p>Register routes with <a href="/docs/router#groups">groups</a>.</p>
    </RouteCard>
  </section>
</template>
"""


def build_config(tmp_path: Path, files: list[str] | None = None) -> AppConfig:
    runtime = RuntimeConfig(
        source_dir=tmp_path / "src",
        output_dir=tmp_path / "out",
        log_dir=tmp_path / "runs",
    )
    mappings = tuple(FileMapping.for_source(name) for name in (files or ["quick-start.vue", "router.vue"]))
    return AppConfig(runtime=runtime, files=mappings)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "src"
    directory.mkdir()
    (directory / "quick-start.vue").write_text(QUICK_START, encoding="utf-8")
    (directory / "router.vue").write_text(ROUTER, encoding="utf-8")
    return directory


@pytest.fixture
def make_config(tmp_path: Path):
    def factory(files: list[str] | None = None) -> AppConfig:
        return build_config(tmp_path, files)

    return factory
