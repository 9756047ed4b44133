# celery -A celery_worker.celery worker --loglevel=info
import os

from dotenv import load_dotenv

load_dotenv(override=False)

from storefront import create_app  # noqa
from storefront.config import configs  # noqa

config_name = os.getenv("FLASK_CONFIG", "develop")
flask_app = create_app(configs[config_name])
celery = flask_app.extensions["celery"]
