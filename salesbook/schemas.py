"""
Request Schemas
Pydantic models that validate and normalize incoming records before they
reach the store. Every violated field is reported, never just the first.
"""

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from pydantic import (
    BaseModel, Field, ValidationError, ValidationInfo,
    field_validator, model_validator,
)

from salesbook.errors import ValidationFailed

CENT = Decimal('0.01')

# Upper bound of a Numeric(10, 2) column
MAX_AMOUNT = Decimal('99999999.99')

FIELD_LABELS = {
    'cash_collected': 'Cash collected',
    'digital_collected': 'Digital collected',
    'expenses': 'Expenses',
    'amount': 'Amount',
    'opening_cash': 'Opening cash',
    'total_sales': 'Total sales',
    'total_collection': 'Total collection',
}


def parse_amount(value, label, strictly_positive=False):
    """
    Parse a decimal-string amount

    Args:
        value: Raw value (string, int, Decimal or float)
        label: Human readable field name used in messages
        strictly_positive: Reject zero as well as negatives

    Returns:
        Decimal: Amount quantized to two places
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f'{label} must be a valid number')
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(f'{label} is required')
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f'{label} must be a valid number')
    if not amount.is_finite():
        raise ValueError(f'{label} must be a valid number')

    if strictly_positive and amount <= 0:
        raise ValueError(f'{label} must be a valid positive number')
    if amount < 0:
        raise ValueError(f'{label} must be a valid non-negative number')

    # Checked before quantize too: huge exponents overflow the decimal context
    if amount > MAX_AMOUNT:
        raise ValueError(f'{label} exceeds the maximum of {MAX_AMOUNT}')
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount > MAX_AMOUNT:
        raise ValueError(f'{label} exceeds the maximum of {MAX_AMOUNT}')
    return amount


def parse_iso_date(value, label='Date'):
    """Parse a YYYY-MM-DD calendar date; no time or timezone component"""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'{label} must be a date in YYYY-MM-DD format')
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f'{label} must be a date in YYYY-MM-DD format')


def parse_record_id(value, label):
    """Ids in a JSON body must be real integers, not booleans or floats"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f'{label} must be a whole number')
    return value


def _required_text(value, label):
    if value is None:
        raise ValueError(f'{label} is required')
    if not isinstance(value, str):
        raise ValueError(f'{label} must be text')
    value = value.strip()
    if not value:
        raise ValueError(f'{label} is required')
    return value


class SalespersonCreate(BaseModel):
    name: str
    email: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v):
        return _required_text(v, 'Name')

    @field_validator('email', mode='before')
    @classmethod
    def validate_email(cls, v):
        # Accepted as opaque text
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError('Email must be text')
        return v.strip() or None


class IndividualSaleLine(BaseModel):
    customer_name: str
    amount: Decimal
    payment_method: str

    @field_validator('customer_name', mode='before')
    @classmethod
    def validate_customer_name(cls, v):
        return _required_text(v, 'Customer name')

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount(cls, v):
        return parse_amount(v, FIELD_LABELS['amount'], strictly_positive=True)

    @field_validator('payment_method', mode='before')
    @classmethod
    def validate_payment_method(cls, v, info: ValidationInfo):
        methods = (info.context or {}).get('payment_methods') or ['cash', 'digital']
        if not isinstance(v, str) or not v.strip():
            raise ValueError('Payment method is required')
        v = v.strip().lower()
        if v not in methods:
            raise ValueError(f"Payment method must be one of: {', '.join(methods)}")
        return v


class IndividualSaleCreate(IndividualSaleLine):
    sales_entry_id: int = Field(..., gt=0)

    @field_validator('sales_entry_id', mode='before')
    @classmethod
    def validate_sales_entry_id(cls, v):
        return parse_record_id(v, 'Sales entry id')


class SalesEntryCreate(BaseModel):
    date: date
    salesperson_id: int = Field(..., gt=0)
    cash_collected: Decimal
    digital_collected: Decimal
    expenses: Decimal
    notes: Optional[str] = None
    individual_sales: List[IndividualSaleLine] = Field(default_factory=list)

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator('salesperson_id', mode='before')
    @classmethod
    def validate_salesperson_id(cls, v):
        return parse_record_id(v, 'Salesperson id')

    @field_validator('cash_collected', 'digital_collected', 'expenses', mode='before')
    @classmethod
    def validate_amounts(cls, v, info: ValidationInfo):
        return parse_amount(v, FIELD_LABELS[info.field_name])

    @field_validator('notes', mode='before')
    @classmethod
    def validate_notes(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError('Notes must be text')
        return v.strip() or None

    @property
    def net_amount(self):
        return self.cash_collected + self.digital_collected - self.expenses


class DailySummaryCreate(BaseModel):
    """Closing balance is derived server-side; a client supplied value is ignored"""
    date: date
    opening_cash: Decimal
    total_sales: Decimal
    total_collection: Decimal

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator('opening_cash', 'total_sales', 'total_collection', mode='before')
    @classmethod
    def validate_amounts(cls, v, info: ValidationInfo):
        return parse_amount(v, FIELD_LABELS[info.field_name])


class DateRangeQuery(BaseModel):
    from_date: date
    to_date: date
    salesperson_id: Optional[int] = Field(None, gt=0)

    @field_validator('from_date', 'to_date', mode='before')
    @classmethod
    def validate_dates(cls, v, info: ValidationInfo):
        label = 'From date' if info.field_name == 'from_date' else 'To date'
        return parse_iso_date(v, label)

    @field_validator('salesperson_id', mode='before')
    @classmethod
    def blank_salesperson(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_range(self):
        if self.from_date > self.to_date:
            raise ValueError('from_date must be on or before to_date')
        return self


def _format_errors(exc):
    """Flatten a pydantic ValidationError into [{field, message}]"""
    errors = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err['loc']) or None
        if err['type'] == 'missing':
            message = f'{field} is required'
        elif err['type'] == 'value_error' and 'error' in err.get('ctx', {}):
            message = str(err['ctx']['error'])
        else:
            message = err['msg']
        errors.append({'field': field, 'message': message})
    return errors


def validate(schema, payload, **context):
    """
    Validate a raw payload against a schema

    Args:
        schema: Pydantic model class
        payload: Decoded JSON object (or query-string dict)
        **context: Values validators may consult, e.g. payment_methods

    Returns:
        Instance of schema

    Raises:
        ValidationFailed: listing every offending field
    """
    if not isinstance(payload, dict):
        raise ValidationFailed([{'field': None, 'message': 'Request body must be a JSON object'}])
    try:
        return schema.model_validate(payload, context=context)
    except ValidationError as e:
        raise ValidationFailed(_format_errors(e))


def validate_date_param(value, field='date', label='Date'):
    """Validate a single date taken from a URL or query string"""
    try:
        return parse_iso_date(value, label)
    except ValueError as e:
        raise ValidationFailed([{'field': field, 'message': str(e)}])
