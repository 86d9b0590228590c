"""Tests for storage_strategy.py."""

import json
import os
import shutil
import tempfile
import unittest
from datetime import date
from importlib.resources import files
from unittest.mock import patch

from schema import Category, ValidationSource
from storage_strategy import (CATALOG_FILE, DATA_PACKAGE, DEFAULT_DATA_DIR,
                              LOCATION_FILE, VALIDATION_FILE,
                              InMemoryStorageStrategy, JsonFileStorageStrategy,
                              VoucherDataError, get_storage_strategy)


class StorageStrategyTests(unittest.TestCase):
    """Tests for storage_strategy.py"""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        for filename in (CATALOG_FILE, LOCATION_FILE, VALIDATION_FILE):
            shutil.copy(os.path.join(DEFAULT_DATA_DIR, filename), self.tmp_dir)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def _overwrite(self, filename, data):
        with open(os.path.join(self.tmp_dir, filename), 'w',
                  encoding='utf-8') as f:
            json.dump(data, f)

    def test_bundled_data_loads(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        self.assertEqual(len(strategy.catalog()), 13)
        self.assertEqual(strategy.catalog()[0].id, 'karcher_cleaning_2025')
        self.assertEqual(strategy.catalog()[0].category, Category.CLEANING)
        self.assertEqual(strategy.catalog()[0].min_spend, '£200')

    def test_missing_min_spend_is_none(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        squeegee = [
            v for v in strategy.catalog() if v.id == 'squeegee_supplies_2025'
        ][0]

        self.assertIsNone(squeegee.min_spend)

    def test_validation_records_are_parsed(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        currys = strategy.validation_records('currys')

        self.assertEqual([r.code for r in currys], ['SAVE25', 'STUDENT10'])
        self.assertEqual(currys[0].expiry_date, date(2025, 1, 31))
        self.assertEqual(currys[0].min_spend, 299)
        self.assertIsNone(currys[0].max_uses)
        self.assertEqual(currys[0].validation_source,
                         ValidationSource.MANUAL_VERIFICATION)

    def test_last_validated_is_load_time_for_every_record(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        stamps = {
            record.last_validated
            for key in strategy.validation_store_keys()
            for record in strategy.validation_records(key)
        }

        self.assertEqual(len(stamps), 1)

    def test_validation_store_keys_keep_table_order(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        keys = strategy.validation_store_keys()

        self.assertEqual(keys[:3], ('currys', 'amazon', 'argos'))
        self.assertEqual(len(keys), 13)

    def test_unknown_store_key_is_empty(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        self.assertEqual(strategy.validation_records('nosuchstore'), ())

    def test_location_lookup_is_case_insensitive(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        res = strategy.location_vouchers('  London ')

        self.assertEqual([v.id for v in res], ['london_local_2025'])

    def test_unknown_location_is_empty(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        self.assertEqual(strategy.location_vouchers('leeds'), ())

    def test_tables_are_read_only(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        self.assertIsInstance(strategy.catalog(), tuple)
        with self.assertRaises(TypeError):
            strategy._validation['currys'] = ()

    def test_in_memory_strategy_copies_input(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)
        records = list(strategy.catalog())
        in_memory = InMemoryStorageStrategy(records)

        records.clear()

        self.assertEqual(len(in_memory.catalog()), 13)
        self.assertEqual(in_memory.validation_store_keys(), ())

    def test_debug_info_reports_sizes(self):
        strategy = JsonFileStorageStrategy(DEFAULT_DATA_DIR)

        info = strategy.debug_info()

        self.assertEqual(info['catalog'], 13)
        self.assertEqual(info['locations']['london'], 1)
        self.assertEqual(info['validation']['currys'], 2)

    def test_unknown_category_is_rejected(self):
        self._overwrite('voucher_catalog.json', [{
            'id': 'x',
            'title': 'x',
            'discount': '1%',
            'retailer': 'x',
            'code': 'X',
            'expiry': 'never',
            'category': 'spaceships',
            'terms': '',
            'verified': True,
            'website': 'https://example.com'
        }])

        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(self.tmp_dir)

    def test_bad_expiry_date_is_rejected(self):
        with open(os.path.join(self.tmp_dir, 'validation_vouchers.json'),
                  encoding='utf-8') as f:
            data = json.load(f)
        data['currys'][0]['expiryDate'] = '31/01/2025'
        self._overwrite('validation_vouchers.json', data)

        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(self.tmp_dir)

    def test_missing_field_is_rejected(self):
        with open(os.path.join(self.tmp_dir, 'voucher_catalog.json'),
                  encoding='utf-8') as f:
            data = json.load(f)
        del data[0]['code']
        self._overwrite('voucher_catalog.json', data)

        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(self.tmp_dir)

    def test_wrong_top_level_shape_is_rejected(self):
        self._overwrite('location_vouchers.json', [])

        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(self.tmp_dir)

    def test_invalid_json_is_rejected(self):
        with open(os.path.join(self.tmp_dir, 'voucher_catalog.json'), 'w',
                  encoding='utf-8') as f:
            f.write('[{')

        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(self.tmp_dir)

    def test_missing_directory_is_rejected(self):
        with self.assertRaises(VoucherDataError):
            JsonFileStorageStrategy(os.path.join(self.tmp_dir, 'nope'))

    @patch.dict(os.environ, clear=True)
    def test_get_storage_strategy_default_dir(self):
        res = get_storage_strategy()

        self.assertIsInstance(res, JsonFileStorageStrategy)
        self.assertEqual(res.data_dir, DEFAULT_DATA_DIR)

    def test_bundled_tables_ship_with_data_package(self):
        bundled = files(DATA_PACKAGE)

        self.assertEqual(str(bundled), DEFAULT_DATA_DIR)
        for filename in (CATALOG_FILE, LOCATION_FILE, VALIDATION_FILE):
            self.assertTrue(bundled.joinpath(filename).is_file(), filename)

    @patch.dict(os.environ, clear=True)
    def test_default_tables_load_from_any_working_directory(self):
        cwd = os.getcwd()
        os.chdir(self.tmp_dir)
        self.addCleanup(os.chdir, cwd)

        res = get_storage_strategy()

        self.assertEqual(len(res.catalog()), 13)
        self.assertEqual(len(res.validation_store_keys()), 13)

    def test_get_storage_strategy_env_dir(self):
        with patch.dict(os.environ, {'VOUCHER_DATA_DIR': self.tmp_dir}):
            res = get_storage_strategy()

        self.assertEqual(res.data_dir, self.tmp_dir)

    def test_get_storage_strategy_argument_beats_env(self):
        with patch.dict(os.environ, {'VOUCHER_DATA_DIR': '/does/not/exist'}):
            res = get_storage_strategy(self.tmp_dir)

        self.assertEqual(res.data_dir, self.tmp_dir)


if __name__ == '__main__':
    unittest.main()
