import const
from storefront.errors.exceptions import BadRequest
from storefront.lib.string import split_full_name
from storefront.models.address import Address

ADDRESS_TYPES = ("shipping", "billing", "both")

# label, accepted keys
SHIPPING_REQUIRED_FIELDS = (
    ("fullName", ("fullName", "name")),
    ("address", ("address", "addressLine1")),
    ("city", ("city",)),
    ("state", ("state",)),
    ("postalCode", ("postalCode", "zipCode")),
)


class AddressService:

    @staticmethod
    def validate_shipping_payload(payload):
        if not payload:
            raise BadRequest(message="Shipping address is required")
        if not isinstance(payload, dict):
            raise BadRequest(message="Shipping address is invalid")

        for label, keys in SHIPPING_REQUIRED_FIELDS:
            if not any(str(payload.get(key) or "").strip() for key in keys):
                raise BadRequest(message=f"Shipping address is invalid: {label} is required")
        return payload

    @staticmethod
    def create_from_shipping_payload(user_id, payload):
        """Snapshot the checkout form into an Address owned by the buyer."""
        payload = AddressService.validate_shipping_payload(payload)
        first_name, last_name = split_full_name(
            payload.get("fullName") or payload.get("name")
        )
        address = Address(
            user_id=str(user_id),
            type="shipping",
            first_name=first_name,
            last_name=last_name,
            address_line1=payload.get("address") or payload.get("addressLine1") or "",
            address_line2=payload.get("addressLine2") or "",
            city=payload.get("city") or "",
            state=payload.get("state") or "",
            zip_code=payload.get("postalCode") or payload.get("zipCode") or "",
            country=payload.get("country") or const.DEFAULT_COUNTRY,
            phone=payload.get("phone") or const.DEFAULT_PHONE,
            is_default=False,
        )
        address.save()
        return address

    @staticmethod
    def find_address(id):
        return Address.find_by_id(id)

    @staticmethod
    def get_addresses(user_id):
        return Address.objects(user_id=str(user_id)).order_by("-is_default", "-created_at")

    @staticmethod
    def create_address(user_id, data):
        address_type = data.get("type") or "shipping"
        if address_type not in ADDRESS_TYPES:
            raise BadRequest(message=f"Invalid address type: {address_type}")
        if not data.get("firstName"):
            raise BadRequest(message="firstName is required")

        is_default = bool(data.get("isDefault"))
        if is_default:
            Address.objects(user_id=str(user_id), is_default=True).update(
                set__is_default=False
            )

        address = Address(
            user_id=str(user_id),
            type=address_type,
            first_name=data["firstName"],
            last_name=data.get("lastName") or data["firstName"],
            address_line1=data.get("addressLine1") or "",
            address_line2=data.get("addressLine2") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip_code=data.get("zipCode") or data.get("postalCode") or "",
            country=data.get("country") or const.DEFAULT_COUNTRY,
            phone=data.get("phone") or const.DEFAULT_PHONE,
            is_default=is_default,
        )
        address.save()
        return address
