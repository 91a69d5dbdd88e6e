"""
Core constants for the Invoice service

Profile names, entity names used in alert headers, and the enumerations
stored in the invoice table.
"""
from enum import Enum


class Profiles:
    """Runtime profile names accepted in APPLICATION_PROFILES"""

    DEVELOPMENT = "dev"
    PRODUCTION = "prod"
    TEST = "test"


class EntityNames:
    """Entity names as they appear in alert/error headers"""

    INVOICE = "invoice"
    SHIPMENT = "shipment"


class InvoiceStatus(str, Enum):
    PAID = "PAID"
    ISSUED = "ISSUED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"
    PAYPAL = "PAYPAL"


class ErrorKeys:
    ID_EXISTS = "idexists"
    ID_NULL = "idnull"
    ID_INVALID = "idinvalid"
    ID_NOT_FOUND = "idnotfound"
    BAD_SORT = "badsort"
    DATA_INTEGRITY = "dataintegrity"
