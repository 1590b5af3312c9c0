"""
Account Store

Owns the account collection. Accounts are kept in a flat key-value
namespace with this layout:

    account_ids     list of ids, in display order
    name_<id>       display name
    total_<id>      total money, as a float string
    limit_<id>      weekly limit, as a float string
    spent_<id>      spent this week, as a float string

Display order is the order ids were first saved; save_all() resets it
to the order of its input.

Every mutation is committed as one batch and then published to
subscribers before the call returns. Each mutation holds the store lock
from reading the id list until publication.
"""

import threading
from typing import Callable, Iterable, Optional
from uuid import uuid4

from budgetwatch.audit import AuditLogger
from budgetwatch.budget.formatting import parse_amount
from budgetwatch.models.budget import Account, AccountField
from budgetwatch.services.storage import KeyValueStoreInterface
from budgetwatch.stores.observable import ObservableValue


KEY_IDS = "account_ids"
DEFAULT_NAME = "Account"


def key_name(account_id: str) -> str:
    return f"name_{account_id}"


def key_total(account_id: str) -> str:
    return f"total_{account_id}"


def key_limit(account_id: str) -> str:
    return f"limit_{account_id}"


def key_spent(account_id: str) -> str:
    return f"spent_{account_id}"


def _account_keys(account_id: str) -> list[str]:
    return [
        key_name(account_id),
        key_total(account_id),
        key_limit(account_id),
        key_spent(account_id),
    ]


def _encode_amount(value: float) -> str:
    return repr(float(value))


def _account_entries(account: Account) -> dict[str, str]:
    return {
        key_name(account.id): account.name,
        key_total(account.id): _encode_amount(account.total_money),
        key_limit(account.id): _encode_amount(account.weekly_limit),
        key_spent(account.id): _encode_amount(account.spent_this_week),
    }


class AccountStore:
    """
    Persistent, observable list of accounts.

    Reads are snapshot reads of the last published list. Mutations are
    serialized by a reentrant lock.
    """

    def __init__(
        self,
        storage: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._lock = threading.RLock()
        self._accounts: ObservableValue[tuple[Account, ...]] = ObservableValue(
            tuple(self._load_accounts()),
            copy=list,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_accounts(self) -> list[Account]:
        """Current accounts in display order."""
        return list(self._accounts.value)

    def get_account(self, account_id: str) -> Optional[Account]:
        for account in self._accounts.value:
            if account.id == account_id:
                return account
        return None

    def subscribe(
        self,
        callback: Callable[[list[Account]], None],
        replay: bool = True,
    ) -> Callable[[], None]:
        """Observe account list snapshots. Returns an unsubscribe function."""
        return self._accounts.subscribe(callback, replay=replay)

    def unsubscribe(self, callback: Callable[[list[Account]], None]) -> None:
        self._accounts.unsubscribe(callback)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def save(self, account: Account) -> None:
        """Insert the account, or replace every field of the one with its id."""
        with self._lock:
            ids = self._get_ids()
            inserted = account.id not in ids
            if inserted:
                ids.append(account.id)

            puts = _account_entries(account)
            puts[KEY_IDS] = ids
            self._storage.commit(puts)

            if self._audit_logger:
                self._audit_logger.log_account_saved(
                    account_id=account.id,
                    name=account.name,
                    inserted=inserted,
                )
            self._publish()

    def save_all(self, accounts: Iterable[Account]) -> None:
        """
        Replace the whole collection.

        Ids missing from the input are removed. If an id appears more
        than once, it keeps its first position and its last values.
        """
        latest: dict[str, Account] = {}
        for account in accounts:
            latest[account.id] = account

        ids = list(latest)
        puts: dict = {}
        for account in latest.values():
            puts.update(_account_entries(account))
        puts[KEY_IDS] = ids

        with self._lock:
            removed_ids = [account_id for account_id in self._get_ids() if account_id not in latest]
            removals = [key for account_id in removed_ids for key in _account_keys(account_id)]

            self._storage.commit(puts, removals)

            if self._audit_logger:
                self._audit_logger.log_accounts_replaced(count=len(ids), removed_ids=removed_ids)
            self._publish()

    def delete(self, account_id: str) -> bool:
        """
        Remove an account.

        Returns:
            True if it existed; deleting an unknown id changes nothing
            and publishes nothing
        """
        with self._lock:
            ids = self._get_ids()
            if account_id not in ids:
                return False

            ids.remove(account_id)
            self._storage.commit({KEY_IDS: ids}, _account_keys(account_id))

            if self._audit_logger:
                self._audit_logger.log_account_deleted(account_id)
            self._publish()
            return True

    def set_all_field(self, field: AccountField, value: float) -> None:
        """Set one amount field to the same value on every account."""
        field = AccountField(field)
        with self._lock:
            accounts = [account.with_field(field, value) for account in self.list_accounts()]
            self.save_all(accounts)

        if self._audit_logger:
            self._audit_logger.log_field_set_for_all(
                field=field.value,
                value=float(value),
                count=len(accounts),
            )

    def set_all_total_money(self, value: float) -> None:
        self.set_all_field(AccountField.TOTAL_MONEY, value)

    def set_all_weekly_limit(self, value: float) -> None:
        self.set_all_field(AccountField.WEEKLY_LIMIT, value)

    def set_all_spent_this_week(self, value: float) -> None:
        self.set_all_field(AccountField.SPENT_THIS_WEEK, value)

    def add_account(self) -> Account:
        """Create an account with zeroed amounts and a numbered name."""
        with self._lock:
            account = Account(
                id=str(uuid4()),
                name=f"Account {len(self._accounts.value) + 1}",
            )
            self.save(account)

        if self._audit_logger:
            self._audit_logger.log_account_added(account_id=account.id, name=account.name)
        return account

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _publish(self) -> None:
        self._accounts.publish(tuple(self._load_accounts()))

    def _get_ids(self) -> list[str]:
        raw = self._storage.get(KEY_IDS, [])
        if not isinstance(raw, list):
            self._recovered(KEY_IDS, raw, [])
            return []

        ids: list[str] = []
        for account_id in raw:
            if isinstance(account_id, str) and account_id and account_id not in ids:
                ids.append(account_id)
        return ids

    def _load_accounts(self) -> list[Account]:
        return [self._load_account(account_id) for account_id in self._get_ids()]

    def _load_account(self, account_id: str) -> Account:
        name = self._storage.get(key_name(account_id))
        if not isinstance(name, str):
            if name is not None:
                self._recovered(key_name(account_id), name, DEFAULT_NAME)
            name = DEFAULT_NAME

        return Account(
            id=account_id,
            name=name,
            total_money=self._read_amount(key_total(account_id)),
            weekly_limit=self._read_amount(key_limit(account_id)),
            spent_this_week=self._read_amount(key_spent(account_id)),
        )

    def _read_amount(self, key: str) -> float:
        """Missing or malformed amounts read as 0.0."""
        raw = self._storage.get(key)
        if raw is None:
            return 0.0

        value = parse_amount(raw, default=None)
        if value is None:
            self._recovered(key, raw, 0.0)
            return 0.0
        return value

    def _recovered(self, key: str, raw_value, fallback) -> None:
        if self._audit_logger:
            self._audit_logger.log_value_recovered(key=key, raw_value=raw_value, fallback=fallback)
