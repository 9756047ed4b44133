from flask import current_app, request

import const


def resolve_request_currency(fallback=None):
    """Header ``X-Currency``/``currency`` > query ``currency`` > fallback > BASE_CURRENCY > INR."""
    currency = (
        request.headers.get("X-Currency")
        or request.headers.get("currency")
        or request.args.get("currency")
        or fallback
        or current_app.config.get("BASE_CURRENCY")
        or const.FALLBACK_CURRENCY
    )
    return str(currency).strip().upper()
