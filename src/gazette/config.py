from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

INDEX_URL = 'https://hacker-news.firebaseio.com/v0/topstories.json?print=pretty&limitToFirst=30&orderBy="$key"'
ITEM_URL_TEMPLATE = "https://hacker-news.firebaseio.com/v0/item/{id}.json"

ENV_PREFIX = "GAZETTE_"


@dataclass(frozen=True)
class GazetteConfig:
    """Settings for the feed, the network layer and the terminal UI"""
    index_url: str = INDEX_URL
    item_url_template: str = ITEM_URL_TEMPLATE
    page_size: int = 30
    timeout: float = 10.0  # seconds, per request
    text_width: int = 80
    tick_interval: float = 0.1
    user_agent: str = "gazette/0.1 (+https://news.ycombinator.com)"
    log_file: Optional[str] = None
    log_level: str = "WARNING"

    def item_url(self, item_id: int) -> str:
        return self.item_url_template.format(id=item_id)

    def update_from_mapping(self, values: Mapping[str, Any]) -> "GazetteConfig":
        """Return a copy with known keys taken from ``values``.

        Unknown keys are ignored and values that cannot be coerced to the
        field's type leave the current value in place.
        """
        changes: Dict[str, Any] = {}
        for f in fields(self):
            if f.name not in values or values[f.name] is None:
                continue
            current = getattr(self, f.name)
            coerced = _coerce(values[f.name], current)
            if coerced is not None:
                changes[f.name] = coerced
        return replace(self, **changes)

    def update_from_env(self, environ: Optional[Mapping[str, str]] = None) -> "GazetteConfig":
        """Apply GAZETTE_* environment variables, e.g. GAZETTE_TIMEOUT=5"""
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(self):
            key = ENV_PREFIX + f.name.upper()
            if key in environ:
                values[f.name] = environ[key]
        return self.update_from_mapping(values)

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "GazetteConfig":
        """Defaults, then the user's config file, then the environment"""
        from .config_persist import load_config
        return cls().update_from_mapping(load_config()).update_from_env(environ)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(value: Any, current: Any) -> Any:
    # JSON true/false would pass as 1/0; none of our fields are bools
    if isinstance(value, bool):
        return None
    try:
        if isinstance(current, int):
            number = int(value)
            return number if number > 0 else None
        if isinstance(current, float):
            number = float(value)
            return number if number > 0 else None
    except (TypeError, ValueError):
        return None
    return value if isinstance(value, str) else None


# Default configuration instance
DEFAULT_CONFIG = GazetteConfig()
