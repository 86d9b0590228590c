"""Validation of specific store/code pairs against the validation table."""

from collections.abc import Callable
from datetime import date, datetime, timezone
from functools import lru_cache
import re

from schema import (ValidationRecord, ValidationResult, ValidationSource,
                    ValidationStatus)
from storage_strategy import (VoucherStorageStrategy,
                              get_default_storage_strategy)

_NON_LETTERS = re.compile(r'[^a-z]')


def _today() -> date:
    return date.today()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_store_key(store: str) -> str:
    """Lower-case a store name and drop everything that isn't a-z."""

    return _NON_LETTERS.sub('', store.lower())


class ValidationLookup:
    """
    Confirms whether a specific code is currently valid for a store.

    Expiry is worked out against the clock at call time; the stored records
    never change. A record is valid on its expiry date and expired the day
    after.
    """

    def __init__(self,
                 storage_strategy: VoucherStorageStrategy,
                 today: Callable[[], date] | None = None):
        self.storage_strategy = storage_strategy
        self._today = today

    def today(self) -> date:
        """Get the current date from the injected clock, if any."""

        return self._today() if self._today else _today()

    def validate(self, store: str, code: str) -> ValidationResult:
        """
        Look up a code for a store.

        Args:
            store (str): store name in any case/spacing, e.g. "John Lewis"
            code (str): the voucher code (case insensitive)

        Returns:
            The stored details with is_valid worked out against today, or a
            not-found result with empty fields.
        """

        records = self.storage_strategy.validation_records(
            normalize_store_key(store))
        code_lower = code.lower()
        record = next((r for r in records if r.code.lower() == code_lower),
                      None)
        if record is None:
            return self._not_found(store, code)

        return self._to_result(store, record, self.today())

    def list_active(self, store: str) -> list[ValidationResult]:
        """Get a store's valid, unexpired records in table order."""

        today = self.today()
        return [
            self._to_result(store, record, today)
            for record in self.storage_strategy.validation_records(
                normalize_store_key(store))
            if record.is_valid and not self._is_expired(record, today)
        ]

    def list_all_active(self) -> list[ValidationResult]:
        """Get every store's active records, store by store in table order."""

        active = []
        for store_key in self.storage_strategy.validation_store_keys():
            active.extend(self.list_active(store_key[:1].upper() +
                                           store_key[1:]))
        return active

    @staticmethod
    def _is_expired(record: ValidationRecord, today: date) -> bool:
        return today > record.expiry_date

    def _to_result(self, store: str, record: ValidationRecord,
                   today: date) -> ValidationResult:
        expired = self._is_expired(record, today)
        if not record.is_valid:
            status = ValidationStatus.INVALID
        elif expired:
            status = ValidationStatus.EXPIRED
        else:
            status = ValidationStatus.VALID

        return ValidationResult(
            is_valid=record.is_valid and not expired,
            store=store,
            code=record.code,
            discount=record.discount,
            description=record.description,
            expiry_date=record.expiry_date.isoformat(),
            min_spend=record.min_spend,
            max_uses=record.max_uses,
            eligibility_criteria=record.eligibility_criteria,
            terms_conditions=record.terms_conditions,
            last_validated=record.last_validated,
            validation_source=record.validation_source,
            status=status)

    @staticmethod
    def _not_found(store: str, code: str) -> ValidationResult:
        return ValidationResult(
            is_valid=False,
            store=store,
            code=code,
            discount='',
            description='',
            expiry_date='',
            min_spend=0,
            max_uses=None,
            eligibility_criteria='',
            terms_conditions='',
            last_validated=_now_iso(),
            validation_source=ValidationSource.MANUAL_VERIFICATION,
            status=ValidationStatus.NOT_FOUND)


@lru_cache(maxsize=None)
def get_default_lookup() -> ValidationLookup:
    """Get the process-wide lookup over the configured data directory."""

    return ValidationLookup(get_default_storage_strategy())


def validate_voucher_code(store: str, code: str) -> ValidationResult:
    return get_default_lookup().validate(store, code)


def get_active_vouchers_for_store(store: str) -> list[ValidationResult]:
    return get_default_lookup().list_active(store)


def get_all_active_vouchers() -> list[ValidationResult]:
    return get_default_lookup().list_all_active()
