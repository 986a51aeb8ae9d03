"""Line and journey reference domain models."""

import hashlib
from dataclasses import dataclass

from transit_trips.domain.models.product import UNKNOWN_PRODUCT_CODE, Product


@dataclass(frozen=True)
class Line:
    """A public transport line as reported by a backend."""

    id: str | None
    network: str | None
    product: Product | None
    label: str | None
    name: str | None = None

    def product_code(self) -> str:
        return self.product.code if self.product else UNKNOWN_PRODUCT_CODE

    def __str__(self) -> str:
        return f"{self.product_code()}{self.label or ''}"


@dataclass(frozen=True)
class JourneyRef:
    """Opaque backend reference to one run of a vehicle, for cross-system correlation."""

    network: str
    ref: str

    def stable_hash(self) -> str:
        """Process-independent digest, unlike the builtin hash() of a str."""
        digest = hashlib.sha256(f"{self.network}\x1f{self.ref}".encode()).hexdigest()
        return digest[:16]
