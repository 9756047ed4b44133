import os
import sys

from loguru import logger as _logger

# "context" is bound by best_effort with the name of the side effect
log_format = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>ctx:{extra[context]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_logger.remove()
_logger.add(sys.stderr, colorize=True, format=log_format, level="INFO")

# LOG_DIR="" keeps logging on stderr only
LOG_DIR = os.environ.get("LOG_DIR", "logs")
if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)
    _logger.add(
        os.path.join(LOG_DIR, "storefront_checkout.json"),
        rotation="100 MB",
        retention="10 days",
        compression="zip",
        serialize=True,
        level="DEBUG",
        enqueue=True,
        catch=True,
    )

logger = _logger.patch(lambda record: record["extra"].setdefault("context", "-"))


def log_critical_infrastructure(message, component="SYSTEM"):
    """Server-side failures surfaced as 5xx (misconfigured gateway, SMTP, rate table)."""
    logger.critical(f"[CRITICAL-{component}] {message}")
