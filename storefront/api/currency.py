# coding: utf8
from flask_restx import Namespace, Resource

from storefront.extensions import exchange_rates
from storefront.lib.response import Response

ns = Namespace(name="currencies", description="Currency API")


@ns.route("")
class APICurrencies(Resource):

    def get(self):
        return Response(data=exchange_rates.to_dict(), message="Success").to_dict()
