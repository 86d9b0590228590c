"""Storage-related functionality for the voucher tables."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from functools import lru_cache
from importlib.resources import files
from types import MappingProxyType
import json
import logging
import os

from schema import ValidationRecord, VoucherRecord

logger = logging.getLogger(__name__)

DATA_PACKAGE = 'voucher_data'
DEFAULT_DATA_DIR = str(files(DATA_PACKAGE))

CATALOG_FILE = 'voucher_catalog.json'
LOCATION_FILE = 'location_vouchers.json'
VALIDATION_FILE = 'validation_vouchers.json'


class VoucherDataError(ValueError):
    """Raised when a voucher data file is missing or malformed."""


class VoucherStorageStrategy(ABC):
    """Abstract base for read-only access to the voucher tables."""

    @abstractmethod
    def catalog(self) -> tuple[VoucherRecord, ...]:
        """Get every catalog record in table order."""

        raise NotImplementedError()

    @abstractmethod
    def location_vouchers(self, location: str) -> tuple[VoucherRecord, ...]:
        """Get the location-exclusive records for a city (or nothing)."""

        raise NotImplementedError()

    @abstractmethod
    def validation_records(self,
                           store_key: str) -> tuple[ValidationRecord, ...]:
        """Get the validation records for a normalized store key."""

        raise NotImplementedError()

    @abstractmethod
    def validation_store_keys(self) -> tuple[str, ...]:
        """Get every store key in the validation table, in table order."""

        raise NotImplementedError()

    @abstractmethod
    def debug_info(self):
        """Get arbitrary debug information (not for production)."""

        raise NotImplementedError()


class InMemoryStorageStrategy(VoucherStorageStrategy):
    """
    Storage strategy over records that are already in memory.

    The records are frozen into tuples and read-only mappings on construction,
    so nothing handed out by this class can be used to change the tables.
    """

    def __init__(self,
                 catalog: Iterable[VoucherRecord],
                 location_vouchers: Mapping[str, Iterable[VoucherRecord]]
                 | None = None,
                 validation: Mapping[str, Iterable[ValidationRecord]]
                 | None = None):
        self._catalog = tuple(catalog)
        self._location_vouchers = MappingProxyType({
            city.lower(): tuple(records)
            for city, records in (location_vouchers or {}).items()
        })
        self._validation = MappingProxyType({
            store_key: tuple(records)
            for store_key, records in (validation or {}).items()
        })

    def catalog(self) -> tuple[VoucherRecord, ...]:
        return self._catalog

    def location_vouchers(self, location: str) -> tuple[VoucherRecord, ...]:
        return self._location_vouchers.get(location.strip().lower(), ())

    def validation_records(self,
                           store_key: str) -> tuple[ValidationRecord, ...]:
        return self._validation.get(store_key, ())

    def validation_store_keys(self) -> tuple[str, ...]:
        return tuple(self._validation.keys())

    def debug_info(self):
        """Get the table sizes in printable form."""

        return {
            'catalog': len(self._catalog),
            'locations': {
                city: len(records)
                for city, records in self._location_vouchers.items()
            },
            'validation': {
                store_key: len(records)
                for store_key, records in self._validation.items()
            }
        }


class JsonFileStorageStrategy(InMemoryStorageStrategy):
    """Storage strategy that loads the tables from JSON files once."""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        loaded_at = datetime.now(timezone.utc).isoformat()

        catalog_data = self._read(CATALOG_FILE)
        location_data = self._read(LOCATION_FILE)
        validation_data = self._read(VALIDATION_FILE)

        catalog = self._parse_list(CATALOG_FILE, catalog_data,
                                   VoucherRecord.from_json)
        location_vouchers = {
            city: self._parse_list(LOCATION_FILE, records,
                                   VoucherRecord.from_json)
            for city, records in self._expect_dict(LOCATION_FILE,
                                                   location_data).items()
        }
        validation = {
            store_key: self._parse_list(
                VALIDATION_FILE, records,
                lambda d: ValidationRecord.from_json(d, loaded_at))
            for store_key, records in self._expect_dict(
                VALIDATION_FILE, validation_data).items()
        }

        super().__init__(catalog, location_vouchers, validation)

        logger.info('Loaded voucher tables',
                    extra={
                        'data_dir': data_dir,
                        'catalog_records': len(catalog),
                        'location_cities': len(location_vouchers),
                        'validation_stores': len(validation)
                    })

    def _read(self, filename: str):
        """Read and decode one JSON data file."""

        path = os.path.join(self.data_dir, filename)
        try:
            with open(path, encoding='utf-8') as f:
                return json.load(f)
        except OSError as e:
            raise VoucherDataError(f'Cannot read {path}: {e}') from e
        except json.JSONDecodeError as e:
            raise VoucherDataError(f'Invalid JSON in {path}: {e}') from e

    @staticmethod
    def _expect_dict(filename: str, data) -> dict:
        if not isinstance(data, dict):
            raise VoucherDataError(f'{filename} must contain an object')
        return data

    @staticmethod
    def _parse_list(filename: str, data, parse) -> list:
        if not isinstance(data, list):
            raise VoucherDataError(f'{filename} must contain lists of records')
        records = []
        for index, item in enumerate(data):
            try:
                records.append(parse(item))
            except (KeyError, TypeError, ValueError) as e:
                raise VoucherDataError(
                    f'Bad record #{index} in {filename}: {e!r}') from e
        return records


def get_storage_strategy(data_dir: str | None = None) -> VoucherStorageStrategy:
    """
    Factory function to get a storage strategy based on the current environment.

    The data directory is taken from the argument if given, then from the
    'VOUCHER_DATA_DIR' environment variable, then the directory of the bundled
    voucher_data package.

    Args:
        data_dir (str|None): directory holding the three JSON tables

    Returns:
        The new storage strategy instance.
    """

    if not data_dir:
        data_dir = os.environ.get('VOUCHER_DATA_DIR', DEFAULT_DATA_DIR)

    return JsonFileStorageStrategy(data_dir)


@lru_cache(maxsize=None)
def get_default_storage_strategy() -> VoucherStorageStrategy:
    """Get the process-wide storage strategy, loading the tables on first use."""

    return get_storage_strategy()
