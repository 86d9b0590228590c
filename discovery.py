"""Relevance filtering of the voucher catalog for a user search."""

from functools import lru_cache

from classifier import CategoryClassifier
from schema import Category, VoucherRecord
from storage_strategy import (VoucherStorageStrategy,
                              get_default_storage_strategy)

MAX_RESULTS = 3


class RelevanceFilter:
    """
    Selects the catalog records relevant to a search query.

    Records match on category, retailer name or title. There is no scoring:
    results keep catalog order and are cut to MAX_RESULTS. When nothing
    matches the result is empty rather than a list of unrelated vouchers.
    """

    def __init__(self,
                 storage_strategy: VoucherStorageStrategy,
                 classifier: CategoryClassifier | None = None,
                 max_results: int = MAX_RESULTS):
        self.storage_strategy = storage_strategy
        self.classifier = classifier or CategoryClassifier()
        self.max_results = max_results

    def discover(self,
                 query: str,
                 location: str | None = None) -> list[VoucherRecord]:
        """
        Find at most max_results vouchers relevant to a query.

        Args:
            query (str): the user's search text (case insensitive)
            location (str|None): optional city used to top up short results

        Returns:
            Matching records in catalog order, possibly empty.
        """

        query = (query or '').strip().lower()
        if not query:
            return []

        search_category = self.classifier.classify(query)

        relevant = [
            voucher for voucher in self.storage_strategy.catalog()
            if self._matches(voucher, query, search_category)
        ]

        if location and len(relevant) < self.max_results:
            relevant.extend(
                voucher
                for voucher in self.storage_strategy.location_vouchers(location)
                if voucher.category in (search_category, Category.GENERAL))

        return relevant[:self.max_results]

    @staticmethod
    def _matches(voucher: VoucherRecord, query: str,
                 search_category: Category | None) -> bool:
        if search_category is not None and voucher.category == search_category:
            return True

        retailer = voucher.retailer.lower()
        retailer_tokens = retailer.split()
        retailer_match = (retailer in query or query in retailer or
                          bool(retailer_tokens) and retailer_tokens[0] in query)

        title = voucher.title.lower()
        title_match = title in query or query in title

        return retailer_match or title_match


@lru_cache(maxsize=None)
def get_default_filter() -> RelevanceFilter:
    """Get the process-wide filter over the configured data directory."""

    return RelevanceFilter(get_default_storage_strategy())


def discover_real_uk_vouchers(query: str,
                              location: str | None = None
                             ) -> list[VoucherRecord]:
    """Find up to three vouchers relevant to a query and optional city."""

    return get_default_filter().discover(query, location)
