# Pagination Defaults
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
DEFAULT_PRODUCT_PER_PAGE = 12

# Currency
FALLBACK_CURRENCY = "INR"
SUPPORTED_CURRENCIES = ["USD", "EUR", "GBP", "INR", "CAD", "AUD", "JPY"]
REFERENCE_CURRENCY = "USD"

# 1 USD = rate * currency
REFERENCE_RATES = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "INR": 83.0,
    "CAD": 1.35,
    "AUD": 1.52,
    "JPY": 150.0,
}

DEFAULT_EXCHANGE_RATE_API_URL = "https://api.exchangerate-api.com/v4/latest/USD"
EXCHANGE_RATE_API_TIMEOUT = 5

# Pricing (base currency)
TAX_RATE = 0.1
FLAT_SHIPPING_FEE = 10.0

# Payment
SUPPORTED_PAYMENT_METHODS = ["stripe", "paypal", "cash_on_delivery"]
PAYMENT_METHOD_ALIASES = {"card": "stripe"}

# Order
ORDER_NUMBER_PREFIX = "ORD"
INVOICE_NUMBER_PREFIX = "INV"
DEFAULT_COUNTRY = "United States"
DEFAULT_PHONE = "0000000000"

# Roles
ROLE_CUSTOMER = "customer"
ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"

PRODUCT_APPROVED = "approved"
COUPON_ACTIVE = "active"
COUPON_INACTIVE = "inactive"

ADMIN_NOTIFICATION_WORKERS = 4
