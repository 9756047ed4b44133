# coding: utf8
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended.exceptions import NoAuthorizationError
from werkzeug.exceptions import default_exceptions

from storefront.errors.handler import api_error_handler
from storefront.extensions import (
    exchange_rates,
    init_mongoengine,
    jwt,
    make_celery,
    payment_gateway,
)
from storefront.lib.logger import logger
from storefront.models import DOCUMENTS


def create_app(config_app):
    app = Flask(__name__)

    cors_scheme = os.environ.get("CORS_SCHEME") or "*"

    CORS(app, resources={r"/*": {"origins": cors_scheme}})
    app.config.from_object(config_app)
    __init_app(app)
    __config_logging(app)
    __register_blueprint(app)
    __config_error_handlers(app)

    return app


def __config_logging(app):
    logger.info(
        f"Start flask... base currency {exchange_rates.get_base_currency()}, "
        f"payments {'live' if payment_gateway.is_configured else 'placeholder'}"
    )


def __register_blueprint(app):
    from storefront.api import bp as api_bp

    app.register_blueprint(api_bp)


def __init_app(app):
    init_mongoengine(app, DOCUMENTS)
    jwt.init_app(app)
    exchange_rates.init_app(app)
    payment_gateway.init_app(app)

    celery = make_celery(app)
    app.extensions["celery"] = celery

    logger.info("Initial app...")


def __config_error_handlers(app):
    for exp in default_exceptions:
        app.register_error_handler(exp, api_error_handler)
    app.register_error_handler(Exception, api_error_handler)

    @app.errorhandler(NoAuthorizationError)
    def handle_auth_error(e):
        return (
            jsonify(
                {"status": 401, "sub_status": 44, "msg": "Missing Authorization Header"}
            ),
            401,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return (
            jsonify({"status": 401, "sub_status": 42, "msg": "The token has expired"}),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return jsonify({"status": 401, "sub_status": 43, "msg": "Invalid token"}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {"status": 401, "sub_status": 44, "msg": "Missing Authorization Header"}
            ),
            401,
        )
