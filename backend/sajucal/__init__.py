"""
sajucal - 사주팔자 만세력 계산 엔진
"""
from sajucal.errors import (
    CalculationError,
    IncompleteLunarDataError,
    InvalidDateError,
    UnrepresentableSymbolError,
)

__version__ = "1.0.0"

__all__ = [
    "CalculationError",
    "IncompleteLunarDataError",
    "InvalidDateError",
    "UnrepresentableSymbolError",
    "__version__",
]
