"""Home, help, and about routes."""

from xitzin import Request, Xitzin

# path -> (route name, template)
STATIC_PAGES = {
    "/": ("home", "home.gmi"),
    "/help": ("help", "help.gmi"),
    "/about": ("about", "about.gmi"),
}


def _page(app: Xitzin, template: str):
    def view(request: Request):
        return app.template(template)

    return view


def register_routes(app: Xitzin) -> None:
    """Register pages that need no certificate and no game."""
    for path, (name, template) in STATIC_PAGES.items():
        app.gemini(path, name=name)(_page(app, template))
