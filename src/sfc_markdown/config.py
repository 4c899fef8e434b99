from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .utils import swap_extension


CONFIG_FILE = Path("config.toml")

DEFAULT_SOURCE_FILES: tuple[str, ...] = (
    "installation.vue",
    "quick-start.vue",
    "tutorial.vue",
    "cli.vue",
    "structure.vue",
    "anatomy.vue",
    "application.vue",
    "auth.vue",
    "configuration.vue",
    "router.vue",
    "middleware.vue",
    "validator.vue",
    "storage.vue",
    "email.vue",
    "logger.vue",
    "scheduler.vue",
    "websocket.vue",
    "emitter.vue",
    "translation.vue",
    "base-helpers.vue",
    "api.vue",
)


@dataclass(frozen=True, slots=True)
class FileMapping:
    source: str
    output: str

    @classmethod
    def for_source(cls, source: str) -> "FileMapping":
        return cls(source=source, output=swap_extension(source))


def _default_files() -> tuple[FileMapping, ...]:
    return tuple(FileMapping.for_source(name) for name in DEFAULT_SOURCE_FILES)


@dataclass(slots=True)
class RuntimeConfig:
    source_dir: Path = Path("../base-web/src/pages/docs")
    output_dir: Path = Path("md/docs")
    log_dir: Path = Path("runs")
    log_file: str = "log.jsonl"
    summary_csv: str = "summary.csv"
    parallelism: int = 1
    max_file_size_mb: int = 5
    enable_local_api: bool = False

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.log_file

    @property
    def summary_path(self) -> Path:
        return self.log_dir / self.summary_csv


@dataclass(slots=True)
class SiteConfig:
    product_name: str = "Base Framework"


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    files: tuple[FileMapping, ...] = field(default_factory=_default_files)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        source_dir=Path(str(data.get("source_dir", "../base-web/src/pages/docs"))),
        output_dir=Path(str(data.get("output_dir", "md/docs"))),
        log_dir=Path(str(data.get("log_dir", "runs"))),
        log_file=str(data.get("log_file", "log.jsonl")),
        summary_csv=str(data.get("summary_csv", "summary.csv")),
        parallelism=max(1, int(data.get("parallelism", 1))),
        max_file_size_mb=int(data.get("max_file_size_mb", 5)),
        enable_local_api=bool(data.get("enable_local_api", False)),
    )


def _build_site(data: Mapping[str, object] | None) -> SiteConfig:
    if not data:
        return SiteConfig()
    return SiteConfig(product_name=str(data.get("product_name", "Base Framework")))


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8000)))


def _build_mapping(item: object) -> FileMapping:
    if isinstance(item, str):
        return FileMapping.for_source(item)
    if isinstance(item, Mapping) and "source" in item:
        source = str(item["source"])
        output = item.get("output")
        return FileMapping(source=source, output=str(output) if output else swap_extension(source))
    raise TypeError(f"Unsupported file entry: {item!r}")


def build_files(value: object | None) -> tuple[FileMapping, ...]:
    if value is None:
        return _default_files()
    if isinstance(value, (str, Mapping)):
        return (_build_mapping(value),)
    if isinstance(value, Iterable):
        return tuple(_build_mapping(item) for item in value)
    raise TypeError(f"Unsupported files configuration: {value!r}")


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    runtime_data = raw.get("runtime")
    site_data = raw.get("site")
    api_data = raw.get("api")
    return AppConfig(
        runtime=_build_runtime(runtime_data if isinstance(runtime_data, Mapping) else None),
        site=_build_site(site_data if isinstance(site_data, Mapping) else None),
        files=build_files(raw.get("files")),
        api=_build_api(api_data if isinstance(api_data, Mapping) else None),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "source_dir": str(config.runtime.source_dir),
            "output_dir": str(config.runtime.output_dir),
            "log_dir": str(config.runtime.log_dir),
            "log_file": config.runtime.log_file,
            "summary_csv": config.runtime.summary_csv,
            "parallelism": config.runtime.parallelism,
            "max_file_size_mb": config.runtime.max_file_size_mb,
            "enable_local_api": config.runtime.enable_local_api,
        },
        "site": {
            "product_name": config.site.product_name,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
        },
        "files": [{"source": item.source, "output": item.output} for item in config.files],
    }
    return json.dumps(payload, indent=2)
