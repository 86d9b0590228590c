"""HTTP client for the voucher service, used by admin and display code."""

import logging
import os
from urllib.parse import quote

import requests

from schema import ValidationResult, VoucherRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:7000'
DEFAULT_TIMEOUT = 10.0


class VoucherServiceClient:
    """
    Thin wrapper over the voucher service's JSON endpoints.

    Non-2xx responses raise requests.HTTPError.
    """

    def __init__(self,
                 base_url: str | None = None,
                 timeout: float | None = None,
                 session: requests.Session | None = None):
        self.base_url = (base_url or os.environ.get(
            'VOUCHER_SERVICE_URL', DEFAULT_BASE_URL)).rstrip('/')
        self.timeout = timeout if timeout is not None else float(
            os.environ.get('VOUCHER_SERVICE_TIMEOUT', DEFAULT_TIMEOUT))
        self.session = session or requests.Session()

    def discover(self,
                 query: str,
                 location: str | None = None) -> list[VoucherRecord]:
        """Find up to three vouchers relevant to a search."""

        body = {'query': query}
        if location:
            body['location'] = location
        data = self._request('POST', '/api/vouchers/real-discovery', json=body)
        return [VoucherRecord.from_json(v) for v in data['vouchers']]

    def validate(self, store: str, code: str) -> ValidationResult:
        """Check one store/code pair."""

        data = self._request('POST',
                             '/api/vouchers/validate-code',
                             json={
                                 'store': store,
                                 'code': code
                             })
        return ValidationResult.from_json(data)

    def active_for_store(self, store: str) -> list[ValidationResult]:
        data = self._request('GET',
                             f'/api/vouchers/active/{quote(store, safe="")}')
        return [ValidationResult.from_json(v) for v in data['vouchers']]

    def all_active(self) -> list[ValidationResult]:
        data = self._request('GET', '/api/vouchers/active')
        return [ValidationResult.from_json(v) for v in data['vouchers']]

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = self.base_url + path
        logger.debug('Voucher service request', extra={
            'method': method,
            'url': url
        })
        response = self.session.request(method,
                                        url,
                                        timeout=self.timeout,
                                        **kwargs)
        response.raise_for_status()
        return response.json()
