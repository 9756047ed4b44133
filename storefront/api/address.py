# coding: utf8
from flask_jwt_extended import jwt_required
from flask_restx import Namespace, Resource

from storefront.decorators import parameters
from storefront.lib.response import Response
from storefront.services.address import ADDRESS_TYPES, AddressService
from storefront.services.auth import AuthService

ns = Namespace(name="addresses", description="Address API")


@ns.route("")
class APIAddresses(Resource):

    @jwt_required()
    def get(self):
        current_user = AuthService.get_current_identity()
        addresses = AddressService.get_addresses(current_user.id)
        return Response(
            data={"addresses": [address.to_json() for address in addresses]},
            message="Success",
        ).to_dict()

    @jwt_required()
    @parameters(
        type="object",
        properties={
            "type": {"type": "string", "enum": list(ADDRESS_TYPES)},
            "firstName": {"type": "string"},
            "lastName": {"type": "string"},
            "addressLine1": {"type": "string"},
            "addressLine2": {"type": "string"},
            "city": {"type": "string"},
            "state": {"type": "string"},
            "zipCode": {"type": "string"},
            "country": {"type": "string"},
            "phone": {"type": "string"},
            "isDefault": {"type": "boolean"},
        },
        required=["firstName", "addressLine1", "city"],
    )
    def post(self, args):
        current_user = AuthService.get_current_identity()
        address = AddressService.create_address(current_user.id, args)
        return Response(
            data={"address": address.to_json()},
            message="Address created",
            code=201,
            status=201,
        ).to_dict()
