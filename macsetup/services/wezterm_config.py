"""WezTerm settings document.

Settings are plain key/value data handed wholesale to WezTerm, which reads
~/.wezterm.lua at startup. The only check made here is that each value can
be written as a Lua literal; WezTerm validates the rest.
"""
import math
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from macsetup.core.logger import get_logger
from macsetup.models.errors import ConfigEmitError

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"
TEMPLATE_NAME = "wezterm.lua.j2"

DEFAULT_SETTINGS: Dict[str, Any] = {
    # Initial geometry for new windows
    'initial_cols': 120,
    'initial_rows': 28,
    'font_size': 16,
    'color_scheme': 'Solarized Dark Higher Contrast (Gogh)',
    'window_background_opacity': 0.8,
}

_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def lua_literal(value: Any) -> str:
    """Render a Python scalar as a Lua literal."""
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and not math.isfinite(value):
        raise ConfigEmitError(f"Cannot write non-finite number as Lua: {value!r}")
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        escaped = (
            value.replace("\\", "\\\\")
            .replace("'", "\\'")
            .replace("\n", "\\n")
            .replace("\r", "\\r")
        )
        return f"'{escaped}'"
    raise ConfigEmitError(f"Cannot write {type(value).__name__} value as Lua: {value!r}")


def parse_override(raw: str) -> Tuple[str, Any]:
    """Parse a ``key=value`` override, typing the value the way YAML would.

    Examples:
        "font_size=14"                     -> ("font_size", 14)
        "window_background_opacity=1.0"    -> ("window_background_opacity", 1.0)
        "color_scheme=Dracula"             -> ("color_scheme", "Dracula")
    """
    if "=" not in raw:
        raise ConfigEmitError(f"Expected key=value, got: {raw}")
    key, _, text = raw.partition("=")
    key = key.strip()
    try:
        value = yaml.safe_load(text) if text.strip() else ""
    except yaml.YAMLError as e:
        raise ConfigEmitError(f"Invalid value for {key}: {e}") from e
    if value is None:
        value = text
    return key, value


class TerminalConfig:
    """Mapping of WezTerm settings, last write wins."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.settings: Dict[str, Any] = dict(DEFAULT_SETTINGS)
        if settings:
            self.update(settings)
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.jinja_env.filters['lua'] = lua_literal

    def set(self, key: str, value: Any):
        if not _KEY_PATTERN.match(key):
            raise ConfigEmitError(f"Invalid setting name: {key!r}")
        self.settings[key] = value

    def update(self, settings: Dict[str, Any]):
        for key, value in settings.items():
            self.set(key, value)

    def apply_overrides(self, overrides: Iterable[str]):
        """Apply ``key=value`` strings in order."""
        for raw in overrides:
            key, value = parse_override(raw)
            self.set(key, value)

    def render(self) -> str:
        """Render the Lua document WezTerm loads."""
        template = self.jinja_env.get_template(TEMPLATE_NAME)
        return template.render(settings=self.settings)

    def write(self, path: Path, mock: bool = False) -> Path:
        """Write the rendered document to ``path``.

        Returns:
            The path written
        """
        path = Path(path).expanduser()
        content = self.render()

        if mock:
            logger.info(f"MOCK: Would write terminal settings to {path}")
            return path

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        logger.info(f"✓ Wrote terminal settings to {path}")
        return path
