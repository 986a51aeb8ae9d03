"""Transport product domain model and its compact single-character codes."""

from enum import Enum
from typing import ClassVar

UNKNOWN_PRODUCT_CODE = "?"


class Product(Enum):
    """Transport mode, valued by its wire code."""

    HIGH_SPEED_TRAIN = "I"
    REGIONAL_TRAIN = "R"
    SUBURBAN_TRAIN = "S"
    SUBWAY = "U"
    TRAM = "T"
    BUS = "B"
    FERRY = "F"
    CABLECAR = "C"
    ON_DEMAND = "P"
    REPLACEMENT_SERVICE = "E"

    ALL_SELECTABLE: ClassVar[frozenset["Product"]]
    ALL_INCLUDING_HIGHSPEED: ClassVar[frozenset["Product"]]
    ALL_EXCEPT_HIGHSPEED: ClassVar[frozenset["Product"]]
    ALL_EXCEPT_HIGHSPEED_AND_ONDEMAND: ClassVar[frozenset["Product"]]
    TRAIN_PRODUCTS: ClassVar[frozenset["Product"]]
    LOCAL_PRODUCTS: ClassVar[frozenset["Product"]]

    @property
    def code(self) -> str:
        return self.value

    def is_train(self) -> bool:
        return self in Product.TRAIN_PRODUCTS

    @classmethod
    def from_code(cls, code: str) -> "Product":
        """Map a single code character to its product.

        Raises:
            ValueError: If the code is not one of the defined codes.
        """
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"unknown product code: '{code}'") from None

    @classmethod
    def from_codes(cls, codes: str | None) -> set["Product"] | None:
        if codes is None:
            return None
        return {cls.from_code(c) for c in codes}

    @staticmethod
    def to_codes(products: "set[Product] | frozenset[Product] | None") -> str | None:
        """Serialize a product set; output order follows the enum declaration."""
        if products is None:
            return None
        return "".join(p.code for p in Product if p in products)


# Both names are kept although their membership is identical.
Product.ALL_SELECTABLE = frozenset(Product) - {Product.REPLACEMENT_SERVICE}
Product.ALL_INCLUDING_HIGHSPEED = frozenset(Product) - {Product.REPLACEMENT_SERVICE}
Product.ALL_EXCEPT_HIGHSPEED = frozenset(Product) - {
    Product.HIGH_SPEED_TRAIN,
    Product.REPLACEMENT_SERVICE,
}
Product.ALL_EXCEPT_HIGHSPEED_AND_ONDEMAND = frozenset(Product) - {
    Product.HIGH_SPEED_TRAIN,
    Product.ON_DEMAND,
    Product.REPLACEMENT_SERVICE,
}
Product.TRAIN_PRODUCTS = frozenset(
    {
        Product.HIGH_SPEED_TRAIN,
        Product.REGIONAL_TRAIN,
        Product.SUBURBAN_TRAIN,
        Product.SUBWAY,
    }
)
Product.LOCAL_PRODUCTS = frozenset(
    {
        Product.REGIONAL_TRAIN,
        Product.SUBURBAN_TRAIN,
        Product.SUBWAY,
        Product.TRAM,
        Product.BUS,
        Product.ON_DEMAND,
    }
)
