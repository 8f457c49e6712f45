"""Jinja2-backed view objects.

A :class:`View` wraps one template. Attributes assigned on the view become
template variables; views assigned into other views render in place.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup, escape

from .config import get_settings


class ViewNotFound(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"The requested view {name} could not be found")
        self.name = name


def chars(value: Any) -> Markup:
    """HTML-escape a value for output; ``None`` renders as an empty string."""
    if value is None:
        return Markup("")
    return escape(value)


@lru_cache
def get_environment(template_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["chars"] = chars
    env.globals["chars"] = chars
    return env


class View:
    def __init__(self, name: str, **data: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "_data", dict(data))

    @classmethod
    def factory(cls, name: str, **data: Any) -> "View":
        return cls(name, **data)

    def __setattr__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __getattr__(self, key: str) -> Any:
        # copy/pickle build instances without __init__, so _data may be absent
        data = self.__dict__.get("_data", {})
        try:
            return data[key]
        except KeyError:
            raise AttributeError(key) from None

    def set(self, key: str, value: Any) -> "View":
        self._data[key] = value
        return self

    @property
    def data(self) -> Dict[str, Any]:
        return dict(self._data)

    def render(self) -> str:
        env = get_environment(Path(get_settings().template_dir))
        try:
            template = env.get_template(f"{self.name}.html")
        except TemplateNotFound as exc:
            raise ViewNotFound(self.name) from exc
        return template.render(**self._data)

    def __html__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"View({self.name!r})"
