from decimal import Decimal
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError

from config import TEMPLATES_DIR

environment = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)

def money(value) -> str:
    if value is None:
        return ""
    return f"{Decimal(value):,.2f}"

environment.filters["money"] = money

def render_template(request: Request, file_path: str, context: dict, status_code: int = 200) -> HTMLResponse:
    """Rend un template Jinja en ajoutant la requête au contexte."""
    template = environment.get_template(file_path)
    html_content = template.render({"request": request, **context})
    return HTMLResponse(content=html_content, status_code=status_code)

def redirect_with_message(url: str, message: str) -> RedirectResponse:
    """Redirection après un POST réussi, le message est affiché par la page cible."""
    return RedirectResponse(url=f"{url}?{urlencode({'message': message})}", status_code=303)

def form_errors(exc: ValidationError) -> dict:
    """Transforme les erreurs pydantic en dictionnaire champ -> message."""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        errors.setdefault(field or "form", error.get("msg", ""))
    return errors
