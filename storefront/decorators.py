# coding: utf8
from functools import wraps

from flask import request
from flask_jwt_extended import verify_jwt_in_request
from jsonschema import FormatChecker, validate
from jsonschema.exceptions import ValidationError

from storefront.errors.exceptions import BadRequest, Forbidden, Unauthorized
from storefront.services.auth import AuthService


def required_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            verify_jwt_in_request()
        except Exception:
            raise Unauthorized(message="Unauthorized")

        current_user = AuthService.get_current_identity()
        if not current_user.is_admin:
            raise Forbidden(message="Admin access required")
        return fn(*args, **kwargs)

    return wrapper


def parameters(**schema):
    """Validate query + JSON/form body against a JSON schema.

    Only declared properties are passed on, appended as the last positional
    argument. A required field counts as missing when absent, None or "".
    """

    def decorated(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            req_args = request.args.to_dict()
            if request.method in ("POST", "PUT", "PATCH", "DELETE"):
                if request.mimetype == "application/json":
                    body = request.get_json(silent=True)
                    if body is None and request.get_data():
                        raise BadRequest(message="Request body is not valid JSON")
                    if body is not None and not isinstance(body, dict):
                        raise BadRequest(message="Request body must be a JSON object")
                    req_args.update(body or {})
                elif request.mimetype in (
                    "multipart/form-data",
                    "application/x-www-form-urlencoded",
                ):
                    req_args.update(request.form.to_dict())

            req_args = {
                k: v for k, v in req_args.items() if k in schema["properties"].keys()
            }

            for field in schema.get("required", []):
                if field not in req_args or req_args[field] is None or req_args[field] == "":
                    field_name = schema["properties"].get(field, {}).get("name", field)
                    raise BadRequest(message="{} is required".format(field_name))

            try:
                validate(instance=req_args, schema=schema, format_checker=FormatChecker())
            except ValidationError as exp:
                exp_info = list(exp.schema_path)
                error_type = (
                    "type",
                    "format",
                    "pattern",
                    "maxLength",
                    "minLength",
                    "minimum",
                    "maximum",
                    "enum",
                )

                if set(exp_info).intersection(set(error_type)) and len(exp_info) > 1:
                    field = exp_info[1]
                    field_config = schema["properties"].get(field, {})
                    valid_values = field_config.get("enum", [])

                    message = f"Field '{field}' is not valid."
                    if valid_values:
                        message += f" Valid values: {', '.join(map(str, valid_values))}."
                else:
                    message = "Request parameters are invalid."

                raise BadRequest(message=message)

            new_args = args + (req_args,)
            return func(*new_args, **kwargs)

        return wrapper

    return decorated
