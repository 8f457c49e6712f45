"""Controller base classes for server-rendered pages."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .views import View


class Controller:
    def __init__(self, request: Request, db: Session) -> None:
        self.request = request
        self.db = db

    def before(self) -> None:
        pass

    def after(self) -> Optional[HTMLResponse]:
        return None

    def execute(self, action: str, **params: Any) -> Any:
        handler = getattr(self, f"action_{action}", None)
        if handler is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown action {action!r}")
        self.before()
        result = handler(**params)
        response = self.after()
        return response if response is not None else result


class TemplateController(Controller):
    """Wraps every action in a layout view rendered once the action returns.

    Actions fill ``self.template`` (usually ``self.template.content``); the
    layout is turned into an :class:`HTMLResponse` by :meth:`after` unless
    ``auto_render`` is switched off.
    """

    template: Any = "template"
    auto_render: bool = True

    def before(self) -> None:
        if self.auto_render:
            self.template = View.factory(self.template)
        self.status_code = status.HTTP_200_OK

    def after(self) -> Optional[HTMLResponse]:
        if not self.auto_render:
            return None
        return HTMLResponse(self.template.render(), status_code=self.status_code)
