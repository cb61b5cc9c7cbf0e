from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .provider import AUTO, ProviderConfig


@dataclass(frozen=True)
class ProxyEnv:
    """Process-wide settings, read once at startup and never mutated."""
    providers: Tuple[ProviderConfig, ...] = ()
    tracking_provider: str = AUTO
    use_mock_data: bool = False
    app_env: str = "production"
    http_timeout: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def mock_enabled(self) -> bool:
        return self.use_mock_data and not self.is_production

    def configured(self) -> Tuple[ProviderConfig, ...]:
        return tuple(p for p in self.providers if p.credentials_present)

    def provider(self, name: str) -> ProviderConfig | None:
        for p in self.providers:
            if p.name == name:
                return p
        return None
