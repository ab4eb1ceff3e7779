"""
Centralized configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., ELASTICSEARCH_URI env var → Settings.ELASTICSEARCH_URI)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

ELASTICSEARCH_URI is optional on purpose: a deployment without a history
index is valid, it just serves live attempts only (history endpoints → 501).
"""

import ssl
from typing import Optional, Union

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Orchestrator (framework controller) ─────────────────────
    LAUNCHER_TYPE: str = "k8s"         # "yarn" is the legacy launcher, no history support
    ORCHESTRATOR_API_URL: str = "http://localhost:8080"
    ORCHESTRATOR_TOKEN: Optional[str] = None
    ORCHESTRATOR_VERIFY_TLS: bool = True
    ORCHESTRATOR_CA_FILE: Optional[str] = None  # CA bundle path, overrides ORCHESTRATOR_VERIFY_TLS
    FRAMEWORK_NAMESPACE: str = "default"

    # ── History index (Elasticsearch) ───────────────────────────
    ELASTICSEARCH_URI: Optional[str] = None
    HISTORY_INDEX: str = "framework"
    HISTORY_MAX_ATTEMPTS: int = 100    # bucket cap for the all-attempts aggregation

    # ── Clients ─────────────────────────────────────────────────
    REQUEST_TIMEOUT: float = 30.0      # seconds, applied to both upstream clients

    # ── App ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    def framework_path(self, name: str) -> str:
        """API path of a framework object in the configured namespace."""
        return (
            f"/apis/frameworkcontroller.microsoft.com/v1"
            f"/namespaces/{self.FRAMEWORK_NAMESPACE}/frameworks/{name}"
        )

    @property
    def orchestrator_verify(self) -> Union[bool, ssl.SSLContext]:
        """What httpx expects for `verify`: an SSL context for a CA bundle, or a bool."""
        if self.ORCHESTRATOR_CA_FILE:
            return ssl.create_default_context(cafile=self.ORCHESTRATOR_CA_FILE)
        return self.ORCHESTRATOR_VERIFY_TLS

    @property
    def request_headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.ORCHESTRATOR_TOKEN:
            headers["Authorization"] = f"Bearer {self.ORCHESTRATOR_TOKEN}"
        return headers

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import this everywhere
settings = Settings()
