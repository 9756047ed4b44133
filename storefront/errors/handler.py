# coding: utf8
from werkzeug.exceptions import HTTPException

from storefront.errors.exceptions import ApiException
from storefront.lib.logger import log_critical_infrastructure, logger


def api_error_handler(error):
    if isinstance(error, ApiException):
        if error.status >= 500:
            log_critical_infrastructure(error.message, component=error.__class__.__name__)
        return error.to_dict(), error.status

    if isinstance(error, HTTPException):
        return {
            "success": False,
            "code": error.code,
            "message": error.description or error.name,
            "data": {},
        }, error.code

    logger.opt(exception=error).error(f"Unhandled exception: {error}")
    return {
        "success": False,
        "code": 500,
        "message": "Internal Server Error",
        "data": {},
    }, 500
