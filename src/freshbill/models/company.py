from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompanyProfile:
    """The shop issuing the invoice (printed in the header)."""

    name: str = "FreshFruits Co."
    email: str = "sales@freshfruits.com"
    phone: str = "+91 98765 43210"
    address: str = "123 Fruit Market, Kochi, Kerala 682001"

    @classmethod
    def from_dict(cls, d: dict) -> CompanyProfile:
        """Create a profile from a YAML-loaded dict, applying defaults for missing fields."""
        default = cls()
        return cls(
            name=d.get("name", default.name),
            email=d.get("email", default.email),
            phone=str(d.get("phone", default.phone)),
            address=d.get("address", default.address),
        )
