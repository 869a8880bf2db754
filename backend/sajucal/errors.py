"""
계산 오류 정의
- CalculationError: 모든 계산 오류의 기반
- InvalidDateError: 파싱 불가/범위 밖 날짜, 잘못된 시각·좌표
- IncompleteLunarDataError: 음력 테이블/Fallback 모두 데이터 없음 (월주는 양력월로 Fallback)
- UnrepresentableSymbolError: 천간/지지로 해석할 수 없는 문자
"""


class CalculationError(Exception):
    """사주 계산 오류"""
    pass


class InvalidDateError(CalculationError, ValueError):
    """날짜/시각 입력 오류"""

    def __init__(self, value, reason: str = ""):
        self.value = value
        self.reason = reason
        message = f"Invalid date input: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IncompleteLunarDataError(CalculationError, LookupError):
    """음력 데이터 없음 - 테이블과 Fallback 모두 실패"""

    def __init__(self, day):
        self.day = day
        super().__init__(f"No lunar calendar data for {day}")


class UnrepresentableSymbolError(CalculationError, ValueError):
    """천간/지지 기호 해석 실패"""

    def __init__(self, symbol, kind: str):
        self.symbol = symbol
        self.kind = kind
        super().__init__(f"Unknown {kind} symbol: {symbol!r}")
