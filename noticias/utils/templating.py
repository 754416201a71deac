import os
from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

email_env = Environment(
    loader=FileSystemLoader(os.path.join(TEMPLATES_DIR, "email")),
    autoescape=True,
)


def render_email(template: str, **context) -> str:
    """Render ``templates/email/<template>.html``."""
    return email_env.get_template(f"{template}.html").render(**context)
