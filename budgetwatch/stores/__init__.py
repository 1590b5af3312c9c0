"""Observable stores for accounts and settings."""

from budgetwatch.stores.accounts import AccountStore
from budgetwatch.stores.observable import ObservableValue
from budgetwatch.stores.settings import SettingsStore

__all__ = ["AccountStore", "ObservableValue", "SettingsStore"]
