from functools import wraps

from storefront.lib.logger import logger


def best_effort(label):
    """Run the wrapped call, log any failure and return None instead of raising."""

    def decorated(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                logger.bind(context=label).warning(
                    f"{label} failed and was skipped: {e.__class__.__name__}: {e}"
                )
                return None

        return wrapper

    return decorated
