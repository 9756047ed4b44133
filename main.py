# coding: utf8
import os

from dotenv import load_dotenv
from flask import request

dotenv_path = os.path.join(os.path.dirname(__file__), ".env")
load_dotenv(dotenv_path=dotenv_path, override=True)

from storefront import create_app  # noqa
from storefront.config import configs as config  # noqa

config_name = os.environ.get("FLASK_CONFIG") or "develop"
config_app = config[config_name]
application = create_app(config_app)


@application.route("/", methods=["GET"])
def index():
    params = dict(request.args)
    is_show_headers = params.get("show_header", "false").lower() == "true"
    if is_show_headers:
        return {
            "message": "Welcome to the Storefront API",
            "headers": dict(request.headers),
        }
    return {"message": "Welcome to the Storefront API"}


@application.route("/health", methods=["GET"])
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    application.run()
