# recorder/config.py — constantes de l'application regroupées dans une structure
# (nom du dossier parent, feuilles, cellules, en-têtes de l'historique)
from __future__ import annotations
import os
from dataclasses import dataclass, replace
from typing import Tuple

HISTORY_HEADERS = ("ファイル名", "保存日時", "フォルダパス", "ファイルリンク", "ファイル形式", "メディアタイプ")
HISTORY_WIDTHS = (250, 150, 250, 300, 100, 100)


@dataclass(frozen=True)
class RecorderConfig:
    parent_folder_name: str = "メディア保存フォルダ"
    settings_sheet_name: str = "シート1"
    subfolder_cell: str = "B1"
    mode_range: str = "E1:E5"
    history_sheet_name: str = "履歴"
    history_headers: Tuple[str, ...] = HISTORY_HEADERS
    history_widths: Tuple[int, ...] = HISTORY_WIDTHS
    migrated_column_width: int = 100
    timestamp_format: str = "%Y/%m/%d %H:%M:%S"
    time_zone: str = "Asia/Tokyo"
    public_base_url: str = "http://localhost:5000"
    cloud_root: str = ""
    page_title: str = "スーパー記録くん - メディア記録アプリ"
    mode_keys: Tuple[str, ...] = ("audio", "video", "photo", "drawing", "text")

    @property
    def format_header(self) -> str:
        return self.history_headers[4]

    @property
    def media_type_header(self) -> str:
        return self.history_headers[5]

    def with_overrides(self, **changes) -> "RecorderConfig":
        return replace(self, **changes)


def load_config() -> RecorderConfig:
    """Build the config from the environment (.env already loaded by create_app)."""
    return RecorderConfig(
        time_zone=os.getenv("TIME_ZONE", "Asia/Tokyo"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:5000").rstrip("/"),
        cloud_root=(os.getenv("CLOUDINARY_FOLDER") or "").strip("/"),
    )
