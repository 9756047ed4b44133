import os
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr

from flask import current_app
from jinja2 import Environment, FileSystemLoader, select_autoescape

from storefront.errors.exceptions import ConfigurationError
from storefront.lib.logger import logger

EMAIL_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(EMAIL_TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def smtp_settings(config=None):
    config = config if config is not None else current_app.config
    return {
        "host": config.get("EMAIL_HOST"),
        "port": int(config.get("EMAIL_PORT") or 587),
        "user": config.get("EMAIL_HOST_USER"),
        "password": config.get("EMAIL_HOST_PASSWORD"),
        "from_name": config.get("EMAIL_FROM_NAME") or "Storefront",
        "encryption": (config.get("EMAIL_ENCRYPTION") or "tls").lower(),
    }


def render_template(template_name, context=None):
    template = jinja_env.get_template(template_name)
    return template.render(**(context or {}))


def send_email(to_email: str, subject: str, template_name: str, context=None, smtp=None):
    smtp = smtp or smtp_settings()
    if not smtp["user"] or not smtp["password"]:
        raise ConfigurationError(message="SMTP credentials are not configured")

    html_content = render_template(template_name, context)

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = formataddr((smtp["from_name"], smtp["user"]))
    msg["To"] = to_email
    msg.attach(MIMEText(html_content, "html"))

    if smtp["encryption"] == "ssl":
        server = smtplib.SMTP_SSL(smtp["host"], smtp["port"])
    else:
        server = smtplib.SMTP(smtp["host"], smtp["port"])
        if smtp["encryption"] == "tls":
            server.starttls()

    try:
        server.login(smtp["user"], smtp["password"])
        server.sendmail(smtp["user"], to_email, msg.as_string())
    finally:
        server.quit()

    logger.info(f"Email sent to {to_email}: {subject}")
    return True
