# coding: utf8
from flask import Flask
from flask_jwt_extended import JWTManager
from celery import Celery
from mongoengine import connect, disconnect

from storefront.lib.logger import logger
from storefront.services.exchange_rate import ExchangeRateService
from storefront.services.payment import PaymentGateway


jwt = JWTManager()
exchange_rates = ExchangeRateService()
payment_gateway = PaymentGateway()


def init_mongoengine(app: Flask, documents=()):
    db_name = app.config["MONGODB_DB"]
    host = app.config["MONGODB_HOST"]
    port = app.config["MONGODB_PORT"]
    username = app.config["MONGODB_USERNAME"]
    password = app.config["MONGODB_PASSWORD"]

    disconnect()
    if app.config.get("MONGODB_MOCK"):
        import mongomock

        connect(
            db=db_name,
            host="mongodb://localhost",
            mongo_client_class=mongomock.MongoClient,
        )
    else:
        if username and password:
            mongo_uri = f"mongodb://{username}:{password}@{host}:{port}/{db_name}"
        else:
            mongo_uri = f"mongodb://{host}:{port}/{db_name}"
        connect(host=mongo_uri)

    for document in documents:
        document.ensure_indexes()

    logger.info(f"Mongo connected: {db_name} ({len(documents)} collections)")


celery = None


def make_celery(app: Flask) -> Celery:
    global celery

    celery = Celery(app.import_name)
    celery.conf.update(
        broker_url=app.config["CELERY_BROKER_URL"],
        result_backend=app.config["CELERY_RESULT_BACKEND"],
        task_always_eager=app.config.get("CELERY_TASK_ALWAYS_EAGER", False),
        task_ignore_result=True,
    )

    class ContextTask(celery.Task):
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    celery.autodiscover_tasks(["storefront.tasks"], related_name="send_notification")
    return celery
