from enum import Enum


class PaymentMethod(str, Enum):
    MIDTRANS = "midtrans"
    # cash on delivery or bank transfer arranged between buyer and seller
    DIRECT = "direct"
