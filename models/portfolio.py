"""Portfolio models: a named group of accounts and the id set it projects."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple


@dataclass(frozen=True)
class AccountSet:
    """Ordered, duplicate-free set of account ids tracked by a projection.

    Callers build one explicitly and pass it into the projection; order is the
    order ids were first given.
    """

    account_ids: Tuple[int, ...] = ()

    def __post_init__(self):
        unique = tuple(dict.fromkeys(self.account_ids))
        object.__setattr__(self, "account_ids", unique)

    @classmethod
    def of(cls, *account_ids: int) -> "AccountSet":
        return cls(tuple(account_ids))

    @classmethod
    def from_iterable(cls, account_ids: Iterable[int]) -> "AccountSet":
        if isinstance(account_ids, AccountSet):
            return account_ids
        return cls(tuple(account_ids))

    def __iter__(self) -> Iterator[int]:
        return iter(self.account_ids)

    def __len__(self) -> int:
        return len(self.account_ids)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self.account_ids


@dataclass
class Portfolio:
    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
