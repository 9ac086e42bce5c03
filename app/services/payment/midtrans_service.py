from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional

import midtransclient
import requests
from fastapi.concurrency import run_in_threadpool
from midtransclient.error_midtrans import MidtransAPIError

from app.core.config import Settings, config
from app.core.logging import get_logger
from app.services.payment.exceptions import PaymentGatewayError

logger = get_logger(__name__)


@dataclass(frozen=True)
class CustomerDetails:
    first_name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class ItemDetails:
    id: str
    price: int
    quantity: int
    name: str


@dataclass(frozen=True)
class SnapToken:
    token: str
    redirect_url: str


@dataclass(frozen=True)
class MidtransNotification:
    order_id: str
    transaction_status: str
    fraud_status: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_type: Optional[str] = None
    gross_amount: Optional[str] = None

    @classmethod
    def from_status_response(cls, response: dict[str, Any]) -> "MidtransNotification":
        return cls(
            order_id=response["order_id"],
            transaction_status=response["transaction_status"],
            fraud_status=response.get("fraud_status"),
            transaction_id=response.get("transaction_id"),
            payment_type=response.get("payment_type"),
            gross_amount=response.get("gross_amount"),
        )


def to_gross_amount(amount: Decimal) -> int:
    # IDR has no minor unit, the gateway rejects fractional amounts
    return int(amount)


class MidtransService:
    def __init__(self, settings: Settings) -> None:
        self.snap = midtransclient.Snap(
            is_production=settings.midtrans_is_production,
            server_key=settings.midtrans_server_key,
            client_key=settings.midtrans_client_key,
        )

    async def create_snap_token(
        self,
        order_id: str,
        gross_amount: int,
        customer: CustomerDetails,
        items: List[ItemDetails],
    ) -> SnapToken:
        """
        Opens a Snap payment session for an order.

        :param order_id: Our transaction id, echoed back in notifications.
        :param gross_amount: Total to charge, must equal the sum of the items.
        :param customer: Buyer details shown on the payment page.
        :param items: Line items of the order.
        :return: Client token and the hosted payment page URL.
        :raises PaymentGatewayError: If the gateway refuses the request.
        """
        parameter = {
            "transaction_details": {
                "order_id": order_id,
                "gross_amount": gross_amount,
            },
            "customer_details": {
                "first_name": customer.first_name,
                "email": customer.email,
                "phone": customer.phone,
            },
            "item_details": [
                {
                    "id": item.id,
                    "price": item.price,
                    "quantity": item.quantity,
                    "name": item.name,
                }
                for item in items
            ],
        }

        try:
            transaction = await run_in_threadpool(self.snap.create_transaction, parameter)
        except (MidtransAPIError, requests.RequestException) as e:
            raise PaymentGatewayError(f"Snap token request failed: {e}") from e

        return SnapToken(
            token=transaction["token"], redirect_url=transaction["redirect_url"]
        )

    async def handle_notification(self, payload: dict[str, Any]) -> MidtransNotification:
        """
        Verifies a webhook payload by fetching the order status from the gateway,
        so a forged payload can not change a transaction.
        """
        try:
            status_response = await run_in_threadpool(
                self.snap.transactions.notification, payload
            )
        except (MidtransAPIError, requests.RequestException, KeyError) as e:
            raise PaymentGatewayError(f"Notification verification failed: {e}") from e

        try:
            return MidtransNotification.from_status_response(status_response)
        except KeyError as e:
            raise PaymentGatewayError(f"Notification is missing {e}") from e

    @classmethod
    async def get_dependency(cls) -> "MidtransService":
        return cls(config)
