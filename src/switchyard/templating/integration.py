"""Kida environment setup.

Creates a kida Environment from switchyard's AppConfig. The environment
is created once when the app freezes and handed to every request's
``ResponseBuilder`` for ``response.render()``.
"""

from pathlib import Path

from kida import Environment, FileSystemLoader

from switchyard.config import AppConfig


def create_environment(config: AppConfig) -> Environment | None:
    """Create a kida Environment from app configuration.

    Returns ``None`` when ``template_dir`` is unset or does not exist, so
    apps without templates never touch the filesystem.
    """
    if config.template_dir is None:
        return None
    template_dir = Path(config.template_dir)
    if not template_dir.is_dir():
        return None

    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
