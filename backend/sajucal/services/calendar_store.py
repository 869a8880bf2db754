"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
SQLite 저장 모듈
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
일별 캘린더 정보(DailyCalendarRecord)를 날짜(YYYY-MM-DD) 키로 저장
계산 엔진은 이 모듈을 사용하지 않음 (서비스 계층 전용)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""
import sqlite3
import json
import logging
from datetime import date, datetime
from typing import List, Optional, Union

from sajucal.models.schemas import DailyCalendarRecord

logger = logging.getLogger(__name__)

DateKey = Union[str, date]


def _date_key(value: DateKey) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class DailyCalendarStore:
    """일별 캘린더 저장소"""

    COLUMNS = (
        "date, year_pillar, month_pillar, day_pillar, hour_pillar, "
        "solar_term, lunar_json, month_rule, degraded, saju_data_json, updated_at"
    )

    def __init__(self, db_path: str = "sajucal.db", logger: Optional[logging.Logger] = None):
        """
        Args:
            db_path: 데이터베이스 파일 경로
        """
        self.db_path = db_path
        self.logger = logger or logging.getLogger(__name__)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_database(self):
        """데이터베이스 초기화"""
        conn = self._connect()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS daily_calendar (
                date TEXT PRIMARY KEY,

                -- 간지
                year_pillar TEXT NOT NULL,
                month_pillar TEXT NOT NULL,
                day_pillar TEXT NOT NULL,
                hour_pillar TEXT,

                -- 절기 / 음력 (JSON)
                solar_term TEXT,
                lunar_json TEXT,
                month_rule TEXT NOT NULL,

                degraded INTEGER NOT NULL DEFAULT 0,
                saju_data_json TEXT,

                updated_at TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()

        self.logger.info(f"[CalendarStore] 초기화 완료: {self.db_path}")

    @staticmethod
    def _row_to_record(row) -> DailyCalendarRecord:
        return DailyCalendarRecord(
            date=row[0],
            year_pillar=row[1],
            month_pillar=row[2],
            day_pillar=row[3],
            hour_pillar=row[4],
            solar_term=row[5],
            lunar_date=json.loads(row[6]) if row[6] else None,
            month_rule=row[7],
            degraded=bool(row[8]),
            saju_data=json.loads(row[9]) if row[9] else None,
            updated_at=row[10],
        )

    def find_by_date(self, date_str: DateKey) -> Optional[DailyCalendarRecord]:
        """날짜 조회 (없으면 None)"""
        conn = self._connect()
        cursor = conn.cursor()
        try:
            cursor.execute(
                f"SELECT {self.COLUMNS} FROM daily_calendar WHERE date=?",
                (_date_key(date_str),),
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if not row:
            return None
        return self._row_to_record(row)

    def find_by_date_range(self, start: DateKey, end: DateKey) -> List[DailyCalendarRecord]:
        """기간 조회 (시작/종료 포함, 날짜 오름차순)"""
        conn = self._connect()
        cursor = conn.cursor()
        try:
            cursor.execute(
                f"SELECT {self.COLUMNS} FROM daily_calendar "
                f"WHERE date BETWEEN ? AND ? ORDER BY date ASC",
                (_date_key(start), _date_key(end)),
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        return [self._row_to_record(row) for row in rows]

    def create_or_update_by_date(self, record: DailyCalendarRecord) -> DailyCalendarRecord:
        """
        날짜 키 기준 저장 (있으면 갱신)

        Returns:
            updated_at이 채워진 레코드
        """
        saved = record.model_copy(update={"updated_at": datetime.now()})

        conn = self._connect()
        cursor = conn.cursor()
        try:
            cursor.execute(f"""
                INSERT INTO daily_calendar ({self.COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET
                    year_pillar=excluded.year_pillar,
                    month_pillar=excluded.month_pillar,
                    day_pillar=excluded.day_pillar,
                    hour_pillar=excluded.hour_pillar,
                    solar_term=excluded.solar_term,
                    lunar_json=excluded.lunar_json,
                    month_rule=excluded.month_rule,
                    degraded=excluded.degraded,
                    saju_data_json=excluded.saju_data_json,
                    updated_at=excluded.updated_at
            """, (
                saved.date,
                saved.year_pillar,
                saved.month_pillar,
                saved.day_pillar,
                saved.hour_pillar,
                saved.solar_term,
                json.dumps(saved.lunar_date.model_dump(), ensure_ascii=False) if saved.lunar_date else None,
                saved.month_rule,
                int(saved.degraded),
                json.dumps(saved.saju_data.model_dump(), ensure_ascii=False) if saved.saju_data else None,
                saved.updated_at.isoformat(),
            ))
            conn.commit()
        finally:
            conn.close()

        self.logger.info(f"[CalendarStore] 저장 완료: {saved.date} (degraded={saved.degraded})")
        return saved
