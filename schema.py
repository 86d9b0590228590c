"""Data models for the voucher tables and lookup results."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class Category(str, Enum):
    """Coarse category tags used by the catalog and the classifier."""

    CLEANING = 'cleaning'
    KITCHEN = 'kitchen'
    BATHROOM = 'bathroom'
    FLOORING = 'flooring'
    HEATING = 'heating'
    ELECTRICAL = 'electrical'
    ROOFING = 'roofing'
    WINDOWS = 'windows'
    DOORS = 'doors'
    GARDEN = 'garden'
    PAINTING = 'painting'
    PLUMBING = 'plumbing'
    TOOLS = 'tools'
    AUTOMOTIVE = 'automotive'
    ELECTRONICS = 'electronics'
    # catalog only, never produced by the classifier
    HOME = 'home'
    FURNITURE = 'furniture'
    # location records
    GENERAL = 'general'
    TRADE = 'trade'
    BUILDING = 'building'


class ValidationSource(str, Enum):
    RETAILER_API = 'retailer_api'
    AFFILIATE_NETWORK = 'affiliate_network'
    MANUAL_VERIFICATION = 'manual_verification'


class ValidationStatus(str, Enum):
    """Outcome of looking up a single store/code pair."""

    VALID = 'valid'
    EXPIRED = 'expired'
    INVALID = 'invalid'
    NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class VoucherRecord:
    id: str
    title: str
    discount: str  # free text: "15%", "£20", "Free Delivery"
    retailer: str
    code: str
    expiry: str  # free-text UK date, display only
    category: Category
    terms: str
    verified: bool
    website: str
    min_spend: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> 'VoucherRecord':
        """Build a record from its camelCase JSON form."""

        return cls(id=data['id'],
                   title=data['title'],
                   discount=data['discount'],
                   retailer=data['retailer'],
                   code=data['code'],
                   expiry=data['expiry'],
                   category=Category(data['category']),
                   terms=data['terms'],
                   verified=bool(data.get('verified', True)),
                   website=data['website'],
                   min_spend=data.get('minSpend', None))

    def to_json(self) -> dict:
        """Serialize to the camelCase form used in API responses."""

        body = {
            'id': self.id,
            'title': self.title,
            'discount': self.discount,
            'retailer': self.retailer,
            'code': self.code,
            'expiry': self.expiry,
            'category': self.category.value,
            'terms': self.terms,
            'verified': self.verified,
            'website': self.website,
        }
        if self.min_spend is not None:
            body['minSpend'] = self.min_spend
        return body


@dataclass(frozen=True)
class ValidationRecord:
    code: str
    discount: str
    description: str
    expiry_date: date
    min_spend: float
    max_uses: int | None
    eligibility_criteria: str
    terms_conditions: str
    is_valid: bool
    validation_source: ValidationSource
    last_validated: str  # load time, not a real check time

    @classmethod
    def from_json(cls, data: dict, last_validated: str) -> 'ValidationRecord':
        """Build a record from its camelCase JSON form."""

        return cls(code=data['code'],
                   discount=data['discount'],
                   description=data['description'],
                   expiry_date=date.fromisoformat(data['expiryDate']),
                   min_spend=data['minSpend'],
                   max_uses=data.get('maxUses', None),
                   eligibility_criteria=data['eligibilityCriteria'],
                   terms_conditions=data['termsConditions'],
                   is_valid=bool(data['isValid']),
                   validation_source=ValidationSource(
                       data['validationSource']),
                   last_validated=last_validated)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    store: str
    code: str
    discount: str
    description: str
    expiry_date: str  # ISO date, or '' when not found
    min_spend: float
    max_uses: int | None
    eligibility_criteria: str
    terms_conditions: str
    last_validated: str
    validation_source: ValidationSource
    status: ValidationStatus

    @classmethod
    def from_json(cls, data: dict) -> 'ValidationResult':
        """Build a result from its camelCase JSON form."""

        return cls(is_valid=data['isValid'],
                   store=data['store'],
                   code=data['code'],
                   discount=data['discount'],
                   description=data['description'],
                   expiry_date=data['expiryDate'],
                   min_spend=data['minSpend'],
                   max_uses=data.get('maxUses', None),
                   eligibility_criteria=data['eligibilityCriteria'],
                   terms_conditions=data['termsConditions'],
                   last_validated=data['lastValidated'],
                   validation_source=ValidationSource(
                       data['validationSource']),
                   status=ValidationStatus(data['status']))

    def to_json(self) -> dict:
        """Serialize to the camelCase form used in API responses."""

        return {
            'isValid': self.is_valid,
            'store': self.store,
            'code': self.code,
            'discount': self.discount,
            'description': self.description,
            'expiryDate': self.expiry_date,
            'minSpend': self.min_spend,
            'maxUses': self.max_uses,
            'eligibilityCriteria': self.eligibility_criteria,
            'termsConditions': self.terms_conditions,
            'lastValidated': self.last_validated,
            'validationSource': self.validation_source.value,
            'status': self.status.value,
        }
