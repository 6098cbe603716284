"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, strict_routing=True)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1
    log_level: str = "info"

    # Routing (applies to the app's root router)
    case_sensitive_routing: bool = False
    strict_routing: bool = False

    # Templates (None disables the kida environment)
    template_dir: str | Path | None = "templates"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
