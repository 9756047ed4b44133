from storefront.lib.logger import logger


class Response:

    def __init__(self, code=200, message="", data=None, status=200):
        try:
            self.status = status
            self.message = message
            self.data = data if data is not None else {}
            self.code = code
        except Exception as e:
            logger.exception(f"Error in Response __init__: {e}")
            self.status = 500
            self.message = "Internal Server Error"
            self.data = {}
            self.code = 500

    def to_dict(self):
        try:
            return {
                "success": 200 <= self.status < 300,
                "code": self.code,
                "message": self.message,
                "data": self.data,
            }, self.status
        except Exception as e:
            logger.exception(f"Error in Response to_dict: {e}")
            return {
                "success": False,
                "code": 500,
                "message": "Internal Server Error",
                "data": {},
            }, 500
