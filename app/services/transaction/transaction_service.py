from typing import List, Literal, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import desc, select

from app.api.dependencies import get_async_session
from app.core.logging import get_logger
from app.models.base import utcnow
from app.models.enums.listing_status import ListingStatus
from app.models.enums.payment_method import PaymentMethod
from app.models.enums.transaction_status import TransactionStatus
from app.models.listing_model import Listing
from app.models.transaction_model import Transaction
from app.models.user_model import User
from app.schemas.transaction_schema import TransactionRole
from app.services.payment.midtrans_service import MidtransNotification
from app.services.payment.status import can_apply_notification, resolve_payment_status

logger = get_logger(__name__)

AllowedTransactionDependencies = Literal["listing", "buyer", "seller"]
DependenciesList = Optional[List[AllowedTransactionDependencies]]

TRANSACTION_DETAIL_DEPENDENCIES: List[AllowedTransactionDependencies] = [
    "listing",
    "buyer",
    "seller",
]


class TransactionService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_transaction_by_id(
        self,
        transaction_id: str,
        dependencies: DependenciesList = None,
    ) -> Transaction | None:
        query = select(Transaction).where(Transaction.id == transaction_id)
        if dependencies:
            query = query.options(
                *[selectinload(getattr(Transaction, dep)) for dep in dependencies]
            )

        result = await self.session.execute(
            query.execution_options(populate_existing=True)
        )
        return result.scalars().one_or_none()

    async def get_user_transactions(
        self, user_id: str, role: TransactionRole = "all"
    ) -> list[Transaction]:
        """
        Returns the user's transactions, newest first.

        :param user_id: ID of the buyer and/or seller.
        :param role: ``buy``, ``sell`` or ``all`` for both sides.
        """
        if role == "buy":
            condition = Transaction.buyer_id == user_id
        elif role == "sell":
            condition = Transaction.seller_id == user_id
        else:
            condition = or_(
                Transaction.buyer_id == user_id, Transaction.seller_id == user_id
            )

        result = await self.session.execute(
            select(Transaction)
            .where(condition)
            .options(
                *[
                    selectinload(getattr(Transaction, dep))
                    for dep in TRANSACTION_DETAIL_DEPENDENCIES
                ]
            )
            .order_by(desc(Transaction.created_at))
        )
        return result.scalars().all()

    async def create_pending_transaction(
        self, listing: Listing, buyer: User, payment_method: PaymentMethod
    ) -> Transaction:
        # check that the listing can still be bought
        if listing.status != ListingStatus.ACTIVE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Listing is not available",
            )

        if listing.seller_id == buyer.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot buy your own listing",
            )

        transaction = Transaction(
            listing_id=listing.id,
            buyer_id=buyer.id,
            seller_id=listing.seller_id,
            amount=listing.price,
            status=TransactionStatus.PENDING,
            payment_method=payment_method,
            payment_id=None,
        )
        self.session.add(transaction)
        await self.session.commit()
        await self.session.refresh(transaction)
        return transaction

    async def discard_transaction(self, transaction: Transaction) -> None:
        """Compensating delete for a transaction whose payment could not be opened."""
        await self.session.delete(transaction)
        await self.session.commit()

    async def apply_notification(
        self, notification: MidtransNotification
    ) -> Transaction | None:
        """
        Applies a verified gateway notification to the matching transaction.

        A paid transaction reserves its listing. Notifications that would move
        the transaction backwards are ignored.

        :return: The transaction, or None when the order id is unknown.
        """
        transaction = await self.get_transaction_by_id(
            notification.order_id, dependencies=["listing"]
        )
        if not transaction:
            logger.warning(
                "Notification for unknown order %s ignored", notification.order_id
            )
            return None

        new_status = resolve_payment_status(
            notification.transaction_status, notification.fraud_status
        )

        if not can_apply_notification(transaction.status, new_status):
            logger.warning(
                "Notification for order %s ignored: %s -> %s is not allowed",
                transaction.id,
                transaction.status.value,
                new_status.value,
            )
            return transaction

        now = utcnow()
        transaction.status = new_status
        transaction.payment_id = notification.transaction_id
        transaction.updated_at = now

        # paid orders hold the listing until the seller completes the sale
        if new_status == TransactionStatus.PAID and transaction.listing:
            transaction.listing.status = ListingStatus.RESERVED
            transaction.listing.updated_at = now

        await self.session.commit()
        return transaction

    async def update_status(
        self, transaction: Transaction, new_status: TransactionStatus, user: User
    ) -> Transaction:
        """
        Manual status change for direct payments.

        Only the seller can complete a sale, only the buyer can cancel it.
        Completing sells the listing, cancelling puts it back on the market.
        """
        if user.id not in (transaction.buyer_id, transaction.seller_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )

        if new_status == TransactionStatus.COMPLETED and transaction.seller_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only seller can mark transaction as completed",
            )

        if new_status == TransactionStatus.CANCELLED and transaction.buyer_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only buyer can cancel transaction",
            )

        now = utcnow()
        transaction.status = new_status
        transaction.updated_at = now

        if transaction.listing:
            if new_status == TransactionStatus.COMPLETED:
                transaction.listing.status = ListingStatus.SOLD
                transaction.listing.updated_at = now
            elif new_status == TransactionStatus.CANCELLED:
                transaction.listing.status = ListingStatus.ACTIVE
                transaction.listing.updated_at = now

        await self.session.commit()
        return transaction

    @classmethod
    async def get_dependency(
        cls,
        session: AsyncSession = Depends(get_async_session),
    ) -> "TransactionService":
        return cls(session)
