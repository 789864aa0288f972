# recorder/history.py — feuille d'historique (« 履歴 ») : une ligne par fichier enregistré
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from recorder.config import RecorderConfig
from recorder.errors import Outcome
from recorder.sheets import SheetHandle, Workbook

logger = logging.getLogger(__name__)


def hyperlink_formula(url: str, text: str) -> str:
    def q(s: str) -> str:
        return str(s).replace('"', '""')
    return f'=HYPERLINK("{q(url)}","{q(text)}")'


class HistoryLog:
    def __init__(self, workbook: Workbook, config: RecorderConfig,
                 clock: Optional[Callable[[], datetime]] = None):
        self.workbook = workbook
        self.config = config
        self._clock = clock

    def _now(self) -> datetime:
        tz = ZoneInfo(self.config.time_zone)
        if self._clock is None:
            return datetime.now(tz)
        return self._clock().astimezone(tz)

    def ensure_store(self) -> SheetHandle:
        """Create the history sheet, or add the format / media type columns to an older one."""
        cfg = self.config
        sheet = self.workbook.get_sheet(cfg.history_sheet_name)

        if sheet is None:
            sheet = self.workbook.insert_sheet(cfg.history_sheet_name)
            self._write_full_header(sheet)
            self.workbook.session.commit()
            logger.info('History sheet "%s" created', cfg.history_sheet_name)
            return sheet

        headers = sheet.get_row(1)
        while headers and headers[-1] in ("", None):
            headers.pop()
        if not headers:
            self._write_full_header(sheet)
            self.workbook.session.commit()
            return sheet

        changed = False
        # colonnes ajoutées à la suite, jamais réordonnées
        for label in (cfg.format_header, cfg.media_type_header):
            if label in headers:
                continue
            new_col = len(headers) + 1
            sheet.set_value((1, new_col), label, bold=True)
            sheet.set_column_width(new_col, cfg.migrated_column_width)
            headers.append(label)
            changed = True
            logger.info('History sheet: added column "%s" at %d', label, new_col)
        if changed:
            self.workbook.session.commit()
        return sheet

    def _write_full_header(self, sheet: SheetHandle) -> None:
        cfg = self.config
        for col, label in enumerate(cfg.history_headers, start=1):
            sheet.set_value((1, col), label)
        sheet.set_bold(1, 1, len(cfg.history_headers))
        for col, width in enumerate(cfg.history_widths, start=1):
            sheet.set_column_width(col, width)

    def append(self, file_name: str, folder_path_text: str, folder_url: str,
               file_url: str, file_format: str, media_type: str) -> Outcome:
        try:
            sheet = self.ensure_store()
            timestamp = self._now().strftime(self.config.timestamp_format)
            sheet.append_row([
                file_name,
                timestamp,
                hyperlink_formula(folder_url, folder_path_text),
                hyperlink_formula(file_url, file_name),
                (file_format or "").upper(),
                media_type,
            ])
            self.workbook.session.commit()
        except Exception as e:
            self.workbook.session.rollback()
            logger.error("History record failed for %s: %s", file_name, e)
            return Outcome.ABSORBED
        logger.info("History recorded: %s, %s, %s", file_name, media_type, file_format)
        return Outcome.OK

    def records(self) -> Dict[str, List]:
        sheet = self.workbook.get_sheet(self.config.history_sheet_name)
        if sheet is None:
            return {"headers": list(self.config.history_headers), "rows": []}
        table = sheet.rows()
        if not table:
            return {"headers": list(self.config.history_headers), "rows": []}
        headers = [str(h) for h in table[0]]
        return {"headers": headers,
                "rows": [dict(zip(headers, row)) for row in table[1:]]}
