from app.models.enums.transaction_status import TransactionStatus

# transaction_status values reported by Midtrans
CAPTURE = "capture"
SETTLEMENT = "settlement"
PENDING = "pending"
DENY = "deny"
CANCEL = "cancel"
EXPIRE = "expire"

FRAUD_ACCEPT = "accept"
FRAUD_CHALLENGE = "challenge"


def resolve_payment_status(
    transaction_status: str | None, fraud_status: str | None
) -> TransactionStatus:
    """
    Maps a gateway notification onto a transaction status.

    A card capture only counts as paid once the fraud check accepted it,
    a challenged capture waits for manual review. Unknown values stay pending.
    """
    if transaction_status == CAPTURE:
        if fraud_status == FRAUD_ACCEPT:
            return TransactionStatus.PAID
        return TransactionStatus.PENDING
    if transaction_status == SETTLEMENT:
        return TransactionStatus.PAID
    if transaction_status in (CANCEL, EXPIRE):
        return TransactionStatus.CANCELLED
    if transaction_status == DENY:
        return TransactionStatus.FAILED
    return TransactionStatus.PENDING


def can_apply_notification(
    current: TransactionStatus, new: TransactionStatus
) -> bool:
    """
    Guards against late or replayed notifications.

    Reapplying the current status is always allowed. A transaction never
    goes back to pending once it left it, and a completed transaction is
    owned by the seller, not the gateway.
    """
    if new == current:
        return True
    if current == TransactionStatus.COMPLETED:
        return False
    if new == TransactionStatus.PENDING:
        return False
    return True
