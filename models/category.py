from enum import Enum


class CategoryKind(str, Enum):
    BUSINESS = "business"   # work expense vocabulary
    HOME = "home"           # household bill vocabulary
