"""Field validators for products"""
import re
from decimal import Decimal

from django.core.exceptions import ValidationError

MAX_PRICE = Decimal('10000000')

JAN_CODE_RE = re.compile(r'^(\d{8}|\d{13})$')


def validate_jan_code(value):
    """JAN codes are 8 or 13 digits"""
    if value is None or not JAN_CODE_RE.match(str(value).strip()):
        raise ValidationError('JAN code must be 8 or 13 digits.', code='invalid_jan_code')


def validate_price(value):
    if value is None:
        raise ValidationError('Price is required.', code='required')
    if value < 0:
        raise ValidationError('Price must be 0 or greater.', code='min_value')
    if value > MAX_PRICE:
        raise ValidationError('Price is unreasonably high.', code='max_value')
