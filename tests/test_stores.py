"""Tests for the observable value, account store and settings store."""

import threading
import time

import pytest

from budgetwatch.models.audit import AuditEventType
from budgetwatch.models.budget import Account, AccountField
from budgetwatch.services.storage import InMemoryKeyValueStore
from budgetwatch.stores import AccountStore, ObservableValue, SettingsStore


def make_account(account_id, name=None, total=0.0, limit=0.0, spent=0.0):
    return Account(
        id=account_id,
        name=name or f"Account {account_id}",
        total_money=total,
        weekly_limit=limit,
        spent_this_week=spent,
    )


class TestObservableValue:
    """Tests for ObservableValue."""

    def test_replay_on_subscribe(self):
        """Test a new subscriber receives the current value by default."""
        observable = ObservableValue(1)
        seen = []
        observable.subscribe(seen.append)
        assert seen == [1]

    def test_no_replay(self):
        """Test replay can be turned off."""
        observable = ObservableValue(1)
        seen = []
        observable.subscribe(seen.append, replay=False)
        observable.publish(2)
        assert seen == [2]

    def test_subscribers_called_in_order(self):
        """Test subscribers run in subscription order."""
        observable = ObservableValue(0)
        calls = []
        observable.subscribe(lambda v: calls.append(("first", v)), replay=False)
        observable.subscribe(lambda v: calls.append(("second", v)), replay=False)
        observable.publish(5)
        assert calls == [("first", 5), ("second", 5)]

    def test_unsubscribe_function(self):
        """Test the returned function stops delivery."""
        observable = ObservableValue(0)
        seen = []
        unsubscribe = observable.subscribe(seen.append, replay=False)
        unsubscribe()
        observable.publish(1)
        assert seen == []

    def test_failing_subscriber_does_not_stop_delivery(self):
        """Test later subscribers still get the value and the error is raised after."""
        observable = ObservableValue(0)
        seen = []

        def failing(value):
            raise RuntimeError("boom")

        observable.subscribe(failing, replay=False)
        observable.subscribe(seen.append, replay=False)

        with pytest.raises(RuntimeError, match="boom"):
            observable.publish(1)
        assert seen == [1]
        assert observable.value == 1

    def test_copy_isolates_subscribers(self):
        """Test each subscriber gets its own copy of the value."""
        observable = ObservableValue((1, 2), copy=list)
        received = []
        observable.subscribe(received.append)
        received[0].append(3)

        assert observable.value == (1, 2)
        assert received == [[1, 2, 3]]

    def test_nested_publish_keeps_order(self):
        """Test a publish from inside a subscriber is delivered after the current one."""
        observable = ObservableValue(0)
        seen = []

        def chain(value):
            if value == 1:
                observable.publish(2)

        observable.subscribe(chain, replay=False)
        observable.subscribe(seen.append, replay=False)
        observable.publish(1)

        assert seen == [1, 2]
        assert observable.value == 2


class TestAccountStoreReads:
    """Tests for loading accounts from storage."""

    def test_empty_storage(self, account_store):
        """Test a fresh store has no accounts."""
        assert account_store.list_accounts() == []

    def test_loads_existing_layout(self):
        """Test accounts are read from the flat key layout."""
        storage = InMemoryKeyValueStore({
            "account_ids": ["a"],
            "name_a": "Food",
            "total_a": "200.0",
            "limit_a": "50.0",
            "spent_a": "12.5",
        })
        store = AccountStore(storage)
        assert store.list_accounts() == [
            Account(id="a", name="Food", total_money=200, weekly_limit=50, spent_this_week=12.5)
        ]

    def test_malformed_amounts_read_as_zero(self, audit_logger, recording_logger):
        """Test unreadable numbers become 0.0 and are logged, never raised."""
        storage = InMemoryKeyValueStore({
            "account_ids": ["a"],
            "name_a": "Food",
            "total_a": "abc",
            "limit_a": "50",
            "spent_a": "1e",
        })
        store = AccountStore(storage, audit_logger=audit_logger)
        account = store.list_accounts()[0]

        assert account.total_money == 0.0
        assert account.weekly_limit == 50.0
        assert account.spent_this_week == 0.0
        recovered = recording_logger.event_types("warning")
        assert recovered.count(AuditEventType.STORED_VALUE_RECOVERED.value) == 2

    def test_missing_fields_use_defaults(self):
        """Test an id without any fields reads as a default account."""
        store = AccountStore(InMemoryKeyValueStore({"account_ids": ["a"]}))
        assert store.list_accounts() == [Account(id="a", name="Account")]

    def test_malformed_id_list_reads_as_empty(self):
        """Test a non-list id entry is recovered as no accounts."""
        store = AccountStore(InMemoryKeyValueStore({"account_ids": "a,b"}))
        assert store.list_accounts() == []

    def test_get_account(self, account_store):
        """Test lookup by id."""
        account = make_account("a")
        account_store.save(account)
        assert account_store.get_account("a") == account
        assert account_store.get_account("zzz") is None


class TestAccountStoreMutations:
    """Tests for save, save_all, delete and set_all_field."""

    def test_save_round_trip(self, account_store):
        """Test a saved account is listed with every field equal."""
        account = make_account("a", name="Food", total=300, limit=50, spent=12.25)
        account_store.save(account)
        assert account in account_store.list_accounts()

    def test_save_persists_key_layout(self, account_store, account_storage):
        """Test the flat key layout written to storage."""
        account_store.save(make_account("a", name="Food", total=300, limit=50, spent=12.25))
        assert account_storage.get("account_ids") == ["a"]
        assert account_storage.get("name_a") == "Food"
        assert account_storage.get("total_a") == "300.0"
        assert account_storage.get("limit_a") == "50.0"
        assert account_storage.get("spent_a") == "12.25"

    def test_save_replaces_all_fields_in_place(self, account_store):
        """Test saving an existing id replaces it without moving it."""
        account_store.save(make_account("a", limit=10))
        account_store.save(make_account("b", limit=20))
        account_store.save(make_account("a", name="Renamed", limit=99))

        accounts = account_store.list_accounts()
        assert [a.id for a in accounts] == ["a", "b"]
        assert accounts[0].name == "Renamed"
        assert accounts[0].weekly_limit == 99.0

    def test_insertion_order(self, account_store):
        """Test accounts are listed in the order they were first saved."""
        for account_id in ["c", "a", "b"]:
            account_store.save(make_account(account_id))
        assert [a.id for a in account_store.list_accounts()] == ["c", "a", "b"]

    def test_survives_new_store_instance(self, account_storage):
        """Test a second store over the same storage sees the accounts."""
        AccountStore(account_storage).save(make_account("a", limit=5))
        assert AccountStore(account_storage).list_accounts() == [make_account("a", limit=5)]

    def test_save_all_removes_missing_ids(self, account_store, account_storage):
        """Test ids absent from save_all are removed along with their keys."""
        a = make_account("a", limit=1)
        b = make_account("b", limit=2)
        account_store.save_all([a, b])
        account_store.save_all([a])

        assert account_store.list_accounts() == [a]
        for key in ["name_b", "total_b", "limit_b", "spent_b"]:
            assert account_storage.contains(key) is False

    def test_save_all_sets_order(self, account_store):
        """Test save_all orders accounts like its input."""
        account_store.save_all([make_account("a"), make_account("b")])
        account_store.save_all([make_account("b"), make_account("a")])
        assert [a.id for a in account_store.list_accounts()] == ["b", "a"]

    def test_save_all_duplicate_ids(self, account_store):
        """Test a repeated id keeps its first position and last values."""
        account_store.save_all([
            make_account("a", limit=1),
            make_account("b"),
            make_account("a", limit=3),
        ])
        accounts = account_store.list_accounts()
        assert [a.id for a in accounts] == ["a", "b"]
        assert accounts[0].weekly_limit == 3.0

    def test_save_all_empty_clears(self, account_store):
        """Test save_all with nothing removes every account."""
        account_store.save(make_account("a"))
        account_store.save_all([])
        assert account_store.list_accounts() == []

    def test_delete(self, account_store, account_storage):
        """Test delete removes the account and its keys."""
        account_store.save(make_account("a"))
        account_store.save(make_account("b"))

        assert account_store.delete("a") is True
        assert [a.id for a in account_store.list_accounts()] == ["b"]
        assert account_storage.contains("name_a") is False

    def test_delete_missing_is_silent_no_op(self, account_store):
        """Test deleting an unknown id changes and publishes nothing."""
        account_store.save(make_account("a"))
        seen = []
        account_store.subscribe(seen.append, replay=False)

        assert account_store.delete("missing") is False
        assert seen == []
        assert len(account_store.list_accounts()) == 1

    @pytest.mark.parametrize("field", list(AccountField))
    def test_set_all_field(self, account_store, field):
        """Test one field is set on every account and nothing else changes."""
        account_store.save(make_account("a", total=1, limit=2, spent=3))
        account_store.save(make_account("b", total=4, limit=5, spent=6))

        account_store.set_all_field(field, 42)

        for account in account_store.list_accounts():
            assert getattr(account, field.value) == 42.0
        before = {"a": (1, 2, 3), "b": (4, 5, 6)}
        for account in account_store.list_accounts():
            values = dict(zip(
                ["total_money", "weekly_limit", "spent_this_week"],
                before[account.id],
            ))
            values.pop(field.value)
            for name, value in values.items():
                assert getattr(account, name) == value

    def test_set_all_convenience_methods(self, account_store):
        """Test the named set-all helpers."""
        account_store.save(make_account("a"))
        account_store.set_all_total_money(10)
        account_store.set_all_weekly_limit(20)
        account_store.set_all_spent_this_week(-5)
        assert account_store.list_accounts() == [
            make_account("a", total=10, limit=20, spent=-5)
        ]

    def test_set_all_on_empty_store(self, account_store):
        """Test setting a field with no accounts is harmless."""
        account_store.set_all_weekly_limit(100)
        assert account_store.list_accounts() == []

    def test_add_account(self, account_store):
        """Test new accounts are numbered and zeroed."""
        first = account_store.add_account()
        second = account_store.add_account()

        assert first.name == "Account 1"
        assert second.name == "Account 2"
        assert first.id != second.id
        assert first.total_money == first.weekly_limit == first.spent_this_week == 0.0
        assert account_store.list_accounts() == [first, second]

    def test_mutations_are_logged(self, account_store, recording_logger):
        """Test store mutations produce audit events."""
        account_store.add_account()
        account_store.set_all_weekly_limit(5)
        types = recording_logger.event_types()
        assert AuditEventType.ACCOUNT_SAVED.value in types
        assert AuditEventType.ACCOUNT_ADDED.value in types
        assert AuditEventType.ACCOUNTS_REPLACED.value in types
        assert AuditEventType.FIELD_SET_FOR_ALL.value in types


class TestAccountStorePublishing:
    """Tests for snapshot publication."""

    def test_subscriber_sees_change_before_save_returns(self, account_store):
        """Test publication is synchronous."""
        seen = []
        account_store.subscribe(seen.append, replay=False)
        account = make_account("a", spent=5)
        account_store.save(account)
        assert seen == [[account]]

    def test_store_reads_are_current_inside_callback(self, account_store):
        """Test subscribers reading the store see the new state."""
        observed = []
        account_store.subscribe(
            lambda _: observed.append(account_store.list_accounts()),
            replay=False,
        )
        account_store.save(make_account("a"))
        assert observed == [[make_account("a")]]

    def test_every_mutation_publishes_in_order(self, account_store):
        """Test each mutating call publishes exactly one snapshot."""
        seen = []
        account_store.subscribe(lambda accounts: seen.append([a.id for a in accounts]))
        account_store.save(make_account("a"))
        account_store.save(make_account("b"))
        account_store.save_all([make_account("b")])
        account_store.delete("b")
        assert seen == [[], ["a"], ["a", "b"], ["b"], []]

    def test_unsubscribe(self, account_store):
        """Test unsubscribed callbacks are not called."""
        seen = []
        account_store.subscribe(seen.append, replay=False)
        account_store.unsubscribe(seen.append)
        account_store.save(make_account("a"))
        assert seen == []

    def test_list_is_a_copy(self, account_store):
        """Test callers cannot change the published snapshot."""
        account_store.save(make_account("a"))
        listed = account_store.list_accounts()
        listed.clear()
        assert len(account_store.list_accounts()) == 1


class SlowIdStorage(InMemoryKeyValueStore):
    """Storage that stalls on reads of the id list."""

    def get(self, key, default=None):
        if key == "account_ids":
            time.sleep(0.02)
        return super().get(key, default)


def run_together(*calls):
    """Start every call on its own thread at the same moment and wait for all."""
    barrier = threading.Barrier(len(calls))
    errors = []

    def worker(call):
        barrier.wait()
        try:
            call()
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    assert errors == []


class TestAccountStoreConcurrency:
    """Tests for mutations arriving from several threads."""

    def test_concurrent_saves_keep_both_accounts(self):
        """Test two simultaneous inserts both end up in the id list."""
        storage = SlowIdStorage()
        store = AccountStore(storage)

        run_together(
            lambda: store.save(make_account("a")),
            lambda: store.save(make_account("b")),
        )

        assert sorted(a.id for a in store.list_accounts()) == ["a", "b"]
        assert sorted(storage.get("account_ids")) == ["a", "b"]

    def test_concurrent_add_account(self):
        """Test simultaneous adds get distinct numbered names."""
        store = AccountStore(SlowIdStorage())

        run_together(*[store.add_account for _ in range(6)])

        names = sorted(a.name for a in store.list_accounts())
        assert names == [f"Account {n}" for n in range(1, 7)]

    def test_concurrent_save_and_delete(self):
        """Test a delete racing a save never resurrects or drops the wrong id."""
        storage = SlowIdStorage()
        store = AccountStore(storage)
        store.save(make_account("a"))

        run_together(
            lambda: store.delete("a"),
            lambda: store.save(make_account("b")),
        )

        assert [a.id for a in store.list_accounts()] == ["b"]
        assert storage.contains("name_a") is False

    def test_subscriber_cannot_change_snapshot(self, account_store):
        """Test a subscriber mutating its list leaves the store intact."""
        account_store.save(make_account("a"))
        account_store.subscribe(lambda accounts: accounts.clear())

        account_store.save(make_account("b"))

        assert [a.id for a in account_store.list_accounts()] == ["a", "b"]
        assert account_store.get_account("a") == make_account("a")

    def test_failing_subscriber_does_not_hide_snapshot(self, account_store):
        """Test later subscribers still see a change when an earlier one fails."""
        seen = []

        def failing(accounts):
            raise RuntimeError("host unavailable")

        account_store.subscribe(failing, replay=False)
        account_store.subscribe(lambda accounts: seen.append([a.id for a in accounts]), replay=False)

        with pytest.raises(RuntimeError):
            account_store.save(make_account("a"))
        assert seen == [["a"]]


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_alerts_enabled_by_default(self, settings_store):
        """Test alerts start enabled."""
        assert settings_store.is_alerts_enabled() is True

    def test_configurable_default(self):
        """Test the default can be turned off."""
        store = SettingsStore(InMemoryKeyValueStore(), default_alerts_enabled=False)
        assert store.is_alerts_enabled() is False

    def test_set_persists_and_publishes(self, settings_store, settings_storage):
        """Test toggling is stored and published synchronously."""
        seen = []
        settings_store.subscribe(seen.append, replay=False)
        settings_store.set_alerts_enabled(False)

        assert settings_store.is_alerts_enabled() is False
        assert settings_storage.get("alerts_enabled") is False
        assert seen == [False]

    def test_value_survives_new_store_instance(self, settings_storage):
        """Test a stored value wins over the default."""
        SettingsStore(settings_storage).set_alerts_enabled(False)
        assert SettingsStore(settings_storage).is_alerts_enabled() is False

    def test_malformed_value_uses_default(self, audit_logger, recording_logger):
        """Test a non-boolean stored value is recovered to the default."""
        store = SettingsStore(
            InMemoryKeyValueStore({"alerts_enabled": "yes"}),
            audit_logger=audit_logger,
        )
        assert store.is_alerts_enabled() is True
        assert AuditEventType.STORED_VALUE_RECOVERED.value in recording_logger.event_types("warning")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
