from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str = "http://localhost:5000"
    dark_mode: bool = False
    request_timeout_s: float = 180.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        env = os.environ if env is None else env
        return cls(
            api_base_url=env.get("API_BASE_URL", cls.api_base_url).rstrip("/"),
            dark_mode=env.get("DARK_MODE", "").strip().lower() in ("1", "true", "yes", "on"),
            request_timeout_s=float(env.get("REQUEST_TIMEOUT_S", cls.request_timeout_s)),
        )
