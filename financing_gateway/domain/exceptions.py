"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MissingFinancingDataError(DomainException):
    """Financed amount, term or nominal rate missing - schedule cannot be computed"""

    pass


class DuplicateExtraordinaryPaymentError(DomainException):
    """More than one extraordinary payment targets the same month"""

    def __init__(self, month: int):
        super().__init__(f"More than one extraordinary payment scheduled for month {month}")
        self.month = month
