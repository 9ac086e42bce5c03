from enum import Enum


class ListingCondition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    USED_GOOD = "used_good"
    USED_FAIR = "used_fair"
