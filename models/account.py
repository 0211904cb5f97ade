from dataclasses import dataclass

ACCOUNT_CATEGORIES = ("asset", "liability", "income", "expense", "external")


@dataclass
class Account:
    id: int
    name: str  # unique, e.g. "checking"
    category: str  # one of ACCOUNT_CATEGORIES
    is_active: bool = True

    def to_dict(self) -> dict:
        """Convert account to dictionary for display."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "is_active": self.is_active,
        }
