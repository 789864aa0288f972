# recorder/settings_sheet.py — feuille de réglages (« シート1 ») :
#   B1     → nom du sous-dossier
#   E1:E5  → modes affichés (audio, vidéo, photo, dessin, texte), 1 = visible
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from recorder.config import RecorderConfig
from recorder.errors import ConfigReadError, Outcome
from recorder.sheets import Workbook, parse_range

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]')


def sanitize_folder_name(value: str) -> str:
    return _UNSAFE_CHARS.sub("_", value)


def is_one(value) -> bool:
    """Loose `== 1` as the sheet editor writes it: 1, 1.0, "1", true."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        try:
            return float(value.strip()) == 1
        except ValueError:
            return False
    return False


class SubfolderNameSource:
    def __init__(self, workbook: Workbook, config: RecorderConfig):
        self.workbook = workbook
        self.config = config

    def read(self) -> Optional[str]:
        try:
            sheet = self.workbook.get_sheet(self.config.settings_sheet_name)
            if sheet is None:
                logger.warning('Sheet "%s" not found', self.config.settings_sheet_name)
                return None
            raw = sheet.get_value(self.config.subfolder_cell)
            name = ("" if raw is None else str(raw)).strip()
            if not name:
                logger.info('No subfolder name in cell "%s"', self.config.subfolder_cell)
                return None
            return sanitize_folder_name(name)
        except Exception as e:
            self.workbook.session.rollback()
            logger.warning("Subfolder name lookup failed: %s", e)
            return None


@dataclass
class ModeSettings:
    audio: bool = True
    video: bool = True
    photo: bool = True
    drawing: bool = True
    text: bool = True
    error: Optional[str] = None
    outcome: Outcome = Outcome.OK

    @classmethod
    def all_visible(cls, error: str) -> "ModeSettings":
        return cls(error=error, outcome=Outcome.ABSORBED)

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {"audio": self.audio, "video": self.video, "photo": self.photo,
                                  "drawing": self.drawing, "text": self.text}
        if self.error:
            out["error"] = self.error
        return out


class ModeSettingsReader:
    def __init__(self, workbook: Workbook, config: RecorderConfig):
        self.workbook = workbook
        self.config = config

    def read(self) -> ModeSettings:
        name = self.config.settings_sheet_name
        try:
            sheet = self.workbook.get_sheet(name)
            if sheet is None:
                return ModeSettings.all_visible(f'Sheet "{name}" not found.')

            values = [row[0] for row in sheet.get_values(self.config.mode_range)]
            if len(values) != len(self.config.mode_keys):
                raise ConfigReadError(f"mode range {self.config.mode_range} must cover "
                                      f"{len(self.config.mode_keys)} cells")
            flags = dict(zip(self.config.mode_keys, (is_one(v) for v in values)))

            # tout masqué : on force le premier mode
            if not any(flags.values()):
                (first_row, col), _ = parse_range(self.config.mode_range)
                sheet.set_value((first_row, col), 1)
                self.workbook.session.commit()
                flags[self.config.mode_keys[0]] = True
                logger.info("All capture modes were hidden, re-enabled %s", self.config.mode_keys[0])

            return ModeSettings(**flags)
        except Exception as e:
            self.workbook.session.rollback()
            logger.error("getModeSettings error: %s", e)
            return ModeSettings.all_visible(str(e))


class SettingsWriter:
    """Edits the settings sheet (there is no spreadsheet UI in this deployment)."""

    def __init__(self, workbook: Workbook, config: RecorderConfig):
        self.workbook = workbook
        self.config = config

    def ensure_sheet(self):
        sheet = self.workbook.get_sheet(self.config.settings_sheet_name)
        if sheet is None:
            sheet = self.workbook.insert_sheet(self.config.settings_sheet_name)
            sheet.set_value(self.config.subfolder_cell, "")
            (r1, col), _ = parse_range(self.config.mode_range)
            for offset in range(len(self.config.mode_keys)):
                sheet.set_value((r1 + offset, col), 1)
            logger.info('Settings sheet "%s" created', self.config.settings_sheet_name)
        return sheet

    def update(self, subfolder: Optional[str] = None,
               modes: Optional[Mapping[str, bool]] = None) -> None:
        sheet = self.ensure_sheet()
        if subfolder is not None:
            sheet.set_value(self.config.subfolder_cell, subfolder)
        if modes:
            (r1, col), _ = parse_range(self.config.mode_range)
            for offset, key in enumerate(self.config.mode_keys):
                if key in modes:
                    sheet.set_value((r1 + offset, col), 1 if modes[key] else 0)
        self.workbook.session.commit()
