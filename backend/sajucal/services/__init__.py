# services package - lazy imports (절기/음력 라이브러리는 실제 사용 시 로딩)
_saju_engine = None
_calendar_service = None

def get_saju_engine():
    global _saju_engine
    if _saju_engine is None:
        from sajucal.services.saju_engine import SajuEngine
        _saju_engine = SajuEngine()
    return _saju_engine

def get_calendar_service():
    global _calendar_service
    if _calendar_service is None:
        from sajucal.services.calendar_service import DailyCalendarService
        _calendar_service = DailyCalendarService(engine=get_saju_engine())
    return _calendar_service
