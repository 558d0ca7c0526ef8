import logging
from typing import Any, Dict
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

PAYSTACK_API_URL = "https://api.paystack.co"


class GatewayError(Exception):
    """Gateway answered with something that is not a JSON envelope."""


class PaystackClient:
    def __init__(self, secret_key: str, base_url: str = PAYSTACK_API_URL, timeout: float = 10):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def _envelope(self, response: requests.Response) -> Dict[str, Any]:
        # Paystack reports failures inside the envelope, often with a 4xx code,
        # so the body is decoded whatever the status.
        try:
            data = response.json()
        except ValueError:
            logger.error(
                f"Paystack returned non-JSON body ({response.status_code}): {response.text[:200]}"
            )
            raise GatewayError(f"Unexpected Paystack response ({response.status_code})")

        if not isinstance(data, dict):
            raise GatewayError("Unexpected Paystack response shape")

        if response.status_code >= 400:
            logger.warning(
                f"Paystack error ({response.status_code}): {data.get('message')}"
            )
        return data

    def initialize_transaction(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a transaction.

        payload: {email, amount (kobo), currency, metadata, callback_url}
        Returns the raw envelope: {status, message, data: {authorization_url, access_code, reference}}
        """
        response = requests.post(
            f"{self.base_url}/transaction/initialize",
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        return self._envelope(response)

    def verify_transaction(self, reference: str) -> Dict[str, Any]:
        response = requests.get(
            f"{self.base_url}/transaction/verify/{quote(reference, safe='')}",
            headers=self.headers,
            timeout=self.timeout,
        )
        return self._envelope(response)
