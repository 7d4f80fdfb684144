# link2app/utils/templating.py
from __future__ import annotations
import re
from jinja2 import Environment, BaseLoader, StrictUndefined

def swift_identifier(name: str) -> str:
    """'my cool app!' -> 'MyCoolApp'; falls back to 'App' if nothing usable is left."""
    words = re.findall(r"[A-Za-z0-9]+", name or "")
    ident = "".join(w[:1].upper() + w[1:] for w in words)
    if not ident:
        return "App"
    return f"App{ident}" if ident[0].isdigit() else ident

def bundle_identifier(name: str) -> str:
    return f"com.{swift_identifier(name).lower()}.app"

_env = Environment(
    loader=BaseLoader(),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
_env.filters["swift_identifier"] = swift_identifier
_env.filters["bundle_identifier"] = bundle_identifier

def render_template(template: str, data: dict) -> str:
    return _env.from_string(template).render(**data)
