import requests

import const
from storefront.errors.exceptions import ConfigurationError
from storefront.lib.logger import logger


class ExchangeRateService:
    """Currency conversion against a configurable base currency.

    ``reference_rates`` holds "units of currency per 1 USD"; ``exchange_rates``
    holds "units of currency per 1 base unit" and is rebuilt whenever the base
    or the reference table changes. No rounding happens here.
    """

    def __init__(self, base_currency=None, reference_rates=None):
        self.base_currency = None
        self.reference_rates = dict(reference_rates or const.REFERENCE_RATES)
        self.exchange_rates = {}
        self.api_url = ""
        if base_currency:
            self.set_base_currency(base_currency)

    def init_app(self, app):
        self.reference_rates = dict(const.REFERENCE_RATES)
        self.api_url = (
            app.config.get("EXCHANGE_RATE_API_URL")
            or const.DEFAULT_EXCHANGE_RATE_API_URL
        )
        self.set_base_currency(app.config.get("BASE_CURRENCY"))
        if app.config.get("EXCHANGE_RATE_REFRESH_ON_START", True):
            self.load_exchange_rates()
        app.extensions["exchange_rates"] = self

    def set_base_currency(self, currency):
        currency = (currency or const.FALLBACK_CURRENCY).upper()
        if currency not in const.SUPPORTED_CURRENCIES:
            logger.warning(
                f"Unsupported base currency {currency}, using {const.FALLBACK_CURRENCY}"
            )
            currency = const.FALLBACK_CURRENCY
        self.base_currency = currency
        self.calculate_exchange_rates()

    def calculate_exchange_rates(self):
        base_rate = self.reference_rates.get(self.base_currency)
        if not base_rate:
            raise ConfigurationError(
                message=f"Invalid base currency rate: {self.base_currency}"
            )

        rates = {}
        for currency, reference_rate in self.reference_rates.items():
            if currency == self.base_currency:
                rates[currency] = 1.0
            else:
                rates[currency] = reference_rate / base_rate
        self.exchange_rates = rates

    def load_exchange_rates(self, api_url=None):
        """Refresh reference rates from the rate API, keeping static ones on failure."""
        api_url = api_url or self.api_url or const.DEFAULT_EXCHANGE_RATE_API_URL
        try:
            response = requests.get(api_url, timeout=const.EXCHANGE_RATE_API_TIMEOUT)
            response.raise_for_status()
            fetched = response.json().get("rates") or {}
            if not fetched:
                logger.warning(f"Exchange rate API returned no rates: {api_url}")
                return False

            rates = {const.REFERENCE_CURRENCY: 1.0}
            for currency in const.SUPPORTED_CURRENCIES:
                if currency == const.REFERENCE_CURRENCY:
                    continue
                rates[currency] = fetched.get(currency) or self.reference_rates[currency]
            self.reference_rates = rates
            self.calculate_exchange_rates()
            logger.info(f"Exchange rates refreshed from {api_url}")
            return True
        except Exception as e:
            logger.warning(f"Failed to fetch exchange rates, using static rates: {e}")
            return False

    def get_base_currency(self):
        return self.base_currency

    def get_supported_currencies(self):
        return list(self.exchange_rates.keys())

    def is_supported(self, currency):
        return bool(currency) and currency.upper() in self.exchange_rates

    def get_exchange_rate(self, currency):
        if not self.exchange_rates or not self.base_currency:
            raise ConfigurationError(message="Exchange rates are not initialized")

        currency = (currency or "").upper()
        if currency == self.base_currency:
            return 1.0

        rate = self.exchange_rates.get(currency)
        if rate is None:
            raise ConfigurationError(
                message=f"Exchange rate not found for currency: {currency}"
            )
        return rate

    def convert_to_currency(self, amount, currency):
        if (currency or "").upper() == self.base_currency:
            return amount
        return amount * self.get_exchange_rate(currency)

    def convert_between_currencies(self, amount, source_currency, target_currency):
        source_currency = (source_currency or "").upper()
        target_currency = (target_currency or "").upper()
        if source_currency == target_currency:
            return amount

        if source_currency != self.base_currency:
            amount = amount / self.get_exchange_rate(source_currency)
        if target_currency != self.base_currency:
            amount = amount * self.get_exchange_rate(target_currency)
        return amount

    def to_dict(self):
        return {
            "base_currency": self.base_currency,
            "supported_currencies": self.get_supported_currencies(),
            "rates": dict(self.exchange_rates),
        }
