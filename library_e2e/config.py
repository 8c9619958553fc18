"""
Configuration for the library suite.

Static values (URLs, timeouts, viewports, message and selector catalogs) come
from data/config.json. Environment variables prefixed with LIBRARY_E2E_ (or a
.env file) override the run-specific parts. The result is one immutable
LibraryConfig, built once per session and handed to every helper.
"""
from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from library_e2e.catalog import SelectorCatalog

DATA_DIR = Path(__file__).parent / "data"

# Served by fake_app.install_fake_library when not running against the live app.
FAKE_BASE_URL = "http://library.test"


class RunSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LIBRARY_E2E_", env_file=".env", extra="ignore")

    base_url: str | None = None
    live: bool = False
    artifacts_dir: str = "artifacts"
    workers: int | None = None
    ci: bool = Field(default=False, validation_alias="CI")


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class Urls:
    base_url: str
    login_path: str
    books_path: str
    add_book_path: str


@dataclass(frozen=True)
class Timeouts:
    """All values in milliseconds."""

    action: int = 10000
    navigation: int = 60000
    expect: int = 10000
    field_visible: int = 2000
    element_visible: int = 2000
    network_idle: int = 5000
    verify_settle: int = 2000
    verify_retry_wait: int = 2000
    reload_settle: int = 1000
    search_settle: int = 500
    dialog_settle: int = 500
    validation_settle: int = 500
    delete_settle: int = 300


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay_ms: int = 1000
    verify_attempts: int = 3


@dataclass(frozen=True)
class LibraryConfig:
    urls: Urls
    timeouts: Timeouts
    retry: RetryPolicy
    viewport: dict
    validation_messages: dict
    selectors: SelectorCatalog
    live: bool = False
    ci: bool = False
    artifacts_dir: Path = Path("artifacts")
    workers: int = 3
    reruns: int = 1
    data_dir: Path = field(default=DATA_DIR)

    @property
    def base_url(self) -> str:
        return self.urls.base_url

    def url(self, path: str) -> str:
        return self.urls.base_url.rstrip("/") + "/" + path.lstrip("/")

    @property
    def books_url_pattern(self) -> re.Pattern:
        return re.compile(
            f"{re.escape(self.url(self.urls.books_path))}|{re.escape(self.urls.books_path)}", re.I
        )

    @property
    def login_url_pattern(self) -> re.Pattern:
        return re.compile(
            f"{re.escape(self.url(self.urls.login_path))}|{re.escape(self.urls.login_path)}", re.I
        )

    @property
    def required_field_messages(self) -> list[str]:
        return list(self.validation_messages["requiredFields"].values())

    def with_base_url(self, base_url: str) -> "LibraryConfig":
        return replace(self, urls=replace(self.urls, base_url=base_url))

    def with_timeouts(self, **overrides) -> "LibraryConfig":
        return replace(self, timeouts=replace(self.timeouts, **overrides))


def read_json(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RuntimeError(f"Failed to load test data from {path}: {e}") from e


def load_config(data_dir: Path | str | None = None, settings: RunSettings | None = None) -> LibraryConfig:
    """
    Builds the session configuration.

    Args:
        data_dir: Directory holding config.json (default: the packaged data).
        settings: Environment settings; read from the environment if omitted.

    Returns:
        The immutable LibraryConfig.
    """
    load_dotenv()
    data_dir = Path(data_dir) if data_dir else DATA_DIR
    settings = settings or RunSettings()
    raw = read_json(data_dir / "config.json")

    urls = {_snake(k): v for k, v in raw["urls"].items()}
    if settings.base_url:
        urls["base_url"] = settings.base_url
    elif not settings.live:
        urls["base_url"] = FAKE_BASE_URL

    run = raw.get("run", {})
    mode = "ci" if settings.ci else "local"
    workers = settings.workers or run.get("workers", {}).get(mode, 1 if settings.ci else 3)

    return LibraryConfig(
        urls=Urls(**urls),
        timeouts=Timeouts(**{_snake(k): v for k, v in raw.get("timeouts", {}).items()}),
        retry=RetryPolicy(**{_snake(k): v for k, v in raw.get("retry", {}).items()}),
        viewport=raw["viewport"],
        validation_messages=raw["validationMessages"],
        selectors=SelectorCatalog.from_dict(raw["selectors"]),
        live=settings.live,
        ci=settings.ci,
        artifacts_dir=Path(os.path.expanduser(settings.artifacts_dir)),
        workers=workers,
        reruns=run.get("reruns", {}).get(mode, 2 if settings.ci else 1),
        data_dir=data_dir,
    )
