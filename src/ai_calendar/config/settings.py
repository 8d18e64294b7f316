from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class LlmSettings:
    provider: str
    model: str
    base_url: str
    temperature: float
    max_tokens: int
    timeout: timedelta
    api_key: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        if self.provider == "openai":
            return bool(self.api_key and self.model)
        return bool(self.base_url and self.model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.model:
            missing.append("AI_CALENDAR_LLM_MODEL")
        if self.provider == "openai" and not self.api_key:
            missing.append("OPENAI_API_KEY")
        if self.provider != "openai" and not self.base_url:
            missing.append("OLLAMA_BASE_URL")
        return missing


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    events_file: Optional[Path]
    events_table: str


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    mcp_port: int


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    supabase: SupabaseSettings
    storage: StorageSettings
    server: ServerSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    provider = os.getenv("AI_CALENDAR_LLM_PROVIDER", "ollama").lower()
    default_model = "gpt-4o-mini" if provider == "openai" else "llama3.1:latest"
    default_base_url = "" if provider == "openai" else "http://localhost:11434"
    base_url_var = "OPENAI_BASE_URL" if provider == "openai" else "OLLAMA_BASE_URL"

    llm = LlmSettings(
        provider=provider,
        model=os.getenv("AI_CALENDAR_LLM_MODEL", default_model),
        base_url=os.getenv(base_url_var, default_base_url),
        temperature=_float_from_env("AI_CALENDAR_LLM_TEMPERATURE", 0.1),
        max_tokens=_int_from_env("AI_CALENDAR_LLM_MAX_TOKENS", 1000),
        timeout=timedelta(seconds=_float_from_env("AI_CALENDAR_LLM_TIMEOUT_SECONDS", 30.0)),
        api_key=os.getenv("OPENAI_API_KEY"),
    )

    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    events_file = os.getenv("AI_CALENDAR_EVENTS_FILE")
    storage = StorageSettings(
        backend=os.getenv("AI_CALENDAR_STORAGE", "json").lower(),
        events_file=Path(events_file) if events_file else None,
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "calendar_events"),
    )

    server = ServerSettings(
        host=os.getenv("AI_CALENDAR_HOST", "127.0.0.1"),
        port=_int_from_env("AI_CALENDAR_PORT", 8000),
        mcp_port=_int_from_env("AI_CALENDAR_MCP_PORT", 8765),
    )

    return AppSettings(llm=llm, supabase=supabase, storage=storage, server=server)
