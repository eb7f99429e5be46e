from jinja2 import DictLoader, Environment, select_autoescape

BASE_HTML = """<!doctype html><html lang=en><head><meta charset=utf-8><meta name=viewport content="width=device-width, initial-scale=1"><meta name=referrer content=no-referrer><title>{{ title }}</title><style>body{font-family:system-ui,-apple-system,Segoe UI,Roboto,sans-serif;background:#f8fafc;color:#0f172a;max-width:40rem;margin:3rem auto;padding:0 1rem}.box{background:#fff;border-radius:1rem;box-shadow:0 1px 3px #0002;padding:1.5rem}.target{word-break:break-all;font-family:monospace;background:#f1f5f9;padding:.5rem;border-radius:.5rem}.btn{display:inline-block;margin-top:1rem;padding:.5rem 1rem;border-radius:.75rem;background:#e11d48;color:#fff;text-decoration:none}</style></head><body><div class=box>{% block content %}{% endblock %}</div></body></html>"""
WARNING_HTML = """{% extends 'base.html' %}{% block content %}<h1>{% if reported %}This link has been reported{% else %}You are leaving this site{% endif %}</h1><p>{% if reported %}Other visitors reported this short link as possibly harmful. Only continue if you trust the destination.{% else %}This short link points to an external site we have not verified.{% endif %}</p><p class=target>{{ target }}</p><a class=btn href="{{ confirm_url }}" rel="noreferrer noopener">Continue to the site</a>{% endblock %}"""
NOT_FOUND_HTML = """{% extends 'base.html' %}{% block content %}<h1>Link not found</h1><p>The short link <code>/{{ code }}</code> does not exist.</p><a href="/">Shorten a URL</a>{% endblock %}"""

env = Environment(
    loader=DictLoader({"base.html": BASE_HTML, "warning.html": WARNING_HTML, "404.html": NOT_FOUND_HTML}),
    autoescape=select_autoescape(default=True),
)


def render_warning(code: str, target: str, reported: bool) -> str:
    title = "Reported link" if reported else "External link"
    return env.get_template("warning.html").render(
        title=title, target=target, reported=reported, confirm_url=f"/{code}?confirmed=1",
    )


def render_not_found(code: str) -> str:
    return env.get_template("404.html").render(title="Link not found", code=code)
