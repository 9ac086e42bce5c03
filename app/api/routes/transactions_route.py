from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.core.logging import get_logger
from app.models.enums.payment_method import PaymentMethod
from app.schemas.common_schema import MessageResponse
from app.schemas.transaction_schema import (
    CheckoutResponse,
    TransactionCreate,
    TransactionDetail,
    TransactionListResponse,
    TransactionRead,
    TransactionResponse,
    TransactionRole,
    TransactionStatusUpdate,
)
from app.services.listing.listing_service import ListingService
from app.services.payment.exceptions import PaymentGatewayError
from app.services.payment.midtrans_service import (
    CustomerDetails,
    ItemDetails,
    MidtransService,
    to_gross_amount,
)
from app.services.transaction.transaction_service import (
    TRANSACTION_DETAIL_DEPENDENCIES,
    TransactionService,
)
from app.services.user.user_service import UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

# Midtrans rejects longer item names
ITEM_NAME_MAX_LENGTH = 50


@router.get(
    "",
    response_model=TransactionListResponse,
    summary="Get current user's transactions",
    description="Transactions where the current user is the buyer (type=buy), the seller (type=sell) or either (type=all).",
)
async def get_my_transactions(
    *,
    role: TransactionRole = Query("all", alias="type"),
    user_service: UserService = Depends(UserService.get_dependency),
    transaction_service: TransactionService = Depends(TransactionService.get_dependency),
):
    current_user = await user_service.get_current_user()

    transactions = await transaction_service.get_user_transactions(current_user.id, role)
    return TransactionListResponse(
        transactions=[TransactionDetail.model_validate(t) for t in transactions]
    )


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction by ID",
    description="Only the buyer and the seller can see a transaction.",
)
async def get_transaction(
    *,
    transaction_id: str,
    user_service: UserService = Depends(UserService.get_dependency),
    transaction_service: TransactionService = Depends(TransactionService.get_dependency),
):
    current_user = await user_service.get_current_user()

    transaction = await transaction_service.get_transaction_by_id(
        transaction_id, dependencies=TRANSACTION_DETAIL_DEPENDENCIES
    )
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )

    # verify user is either buyer or seller
    if current_user.id not in (transaction.buyer_id, transaction.seller_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )

    return TransactionResponse(transaction=TransactionDetail.model_validate(transaction))


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Buy a listing",
    description="Creates a pending transaction. For midtrans payments a Snap token is returned as well.",
)
async def create_transaction(
    *,
    data: TransactionCreate,
    user_service: UserService = Depends(UserService.get_dependency),
    listing_service: ListingService = Depends(ListingService.get_dependency),
    transaction_service: TransactionService = Depends(TransactionService.get_dependency),
    midtrans_service: MidtransService = Depends(MidtransService.get_dependency),
):
    current_user = await user_service.get_current_user()

    listing = await listing_service.get_listing_by_id(data.listing_id)
    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Listing not found",
        )

    transaction = await transaction_service.create_pending_transaction(
        listing, current_user, data.payment_method
    )

    # cash on delivery and other direct payments need no gateway session
    if data.payment_method != PaymentMethod.MIDTRANS:
        return CheckoutResponse(transaction=TransactionRead.model_validate(transaction))

    gross_amount = to_gross_amount(listing.price)
    try:
        snap = await midtrans_service.create_snap_token(
            order_id=transaction.id,
            gross_amount=gross_amount,
            customer=CustomerDetails(
                first_name=current_user.name,
                email=current_user.email,
                phone=current_user.phone_number,
            ),
            items=[
                ItemDetails(
                    id=listing.id,
                    price=gross_amount,
                    quantity=1,
                    name=listing.title[:ITEM_NAME_MAX_LENGTH],
                )
            ],
        )
    except PaymentGatewayError as e:
        logger.error("Midtrans error for transaction %s: %s", transaction.id, e)
        # the row has no payment session behind it, remove it again
        await transaction_service.discard_transaction(transaction)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create payment",
        )

    return CheckoutResponse(
        transaction=TransactionRead.model_validate(transaction),
        snap_token=snap.token,
        snap_redirect_url=snap.redirect_url,
    )


@router.post(
    "/midtrans/notification",
    response_model=MessageResponse,
    summary="Midtrans payment notification webhook",
    description="Called by Midtrans. The payload is verified against the gateway before the transaction is updated.",
)
async def midtrans_notification(
    *,
    payload: Dict[str, Any] = Body(...),
    transaction_service: TransactionService = Depends(TransactionService.get_dependency),
    midtrans_service: MidtransService = Depends(MidtransService.get_dependency),
):
    try:
        notification = await midtrans_service.handle_notification(payload)
    except PaymentGatewayError as e:
        logger.error("Notification processing error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process notification",
        )

    logger.info(
        "Transaction notification received. Order ID: %s. Transaction status: %s. Fraud status: %s",
        notification.order_id,
        notification.transaction_status,
        notification.fraud_status,
    )

    await transaction_service.apply_notification(notification)
    return MessageResponse(message="Notification processed")


@router.put(
    "/{transaction_id}/status",
    response_model=TransactionResponse,
    summary="Update transaction status",
    description="Seller completes a sale (listing becomes sold), buyer cancels it (listing becomes active).",
)
async def update_transaction_status(
    *,
    transaction_id: str,
    data: TransactionStatusUpdate,
    user_service: UserService = Depends(UserService.get_dependency),
    transaction_service: TransactionService = Depends(TransactionService.get_dependency),
):
    current_user = await user_service.get_current_user()

    transaction = await transaction_service.get_transaction_by_id(
        transaction_id, dependencies=["listing"]
    )
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )

    await transaction_service.update_status(transaction, data.status, current_user)

    transaction = await transaction_service.get_transaction_by_id(
        transaction_id, dependencies=TRANSACTION_DETAIL_DEPENDENCIES
    )
    return TransactionResponse(transaction=TransactionDetail.model_validate(transaction))
