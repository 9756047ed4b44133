# coding: utf8


class ApiException(Exception):
    status = 500
    default_message = "Internal Server Error"

    def __init__(self, message=None, data=None, status=None):
        self.message = message or self.default_message
        # not "data": flask-restx would send exc.data as the whole body
        self.payload = data or {}
        if status is not None:
            self.status = status
        super(ApiException, self).__init__(self.message)

    def to_dict(self):
        return {
            "success": False,
            "code": self.status,
            "message": self.message,
            "data": self.payload,
        }


class BadRequest(ApiException):
    status = 400
    default_message = "Bad Request"


class Unauthorized(ApiException):
    status = 401
    default_message = "Unauthorized"


class Forbidden(ApiException):
    status = 403
    default_message = "Forbidden"


class NotFound(ApiException):
    status = 404
    default_message = "Not Found"


class ConfigurationError(ApiException):
    status = 500
    default_message = "Service is not configured"
