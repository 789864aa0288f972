# recorder/pipeline.py — enregistrement des médias (audio, vidéo, photo, dessin, texte)
# Une seule chaîne : validation → dossier cible → décodage → écriture → historique → résultat
from __future__ import annotations
import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from recorder.config import RecorderConfig
from recorder.errors import InvalidArgument, InvalidFormat, Outcome, RecorderError
from recorder.folders import FolderStore
from recorder.history import HistoryLog
from recorder.settings_sheet import SubfolderNameSource
from recorder.sheets import Workbook

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(.+?);base64,(.+)$")

DATA_URL = "data_url"
TEXT = "text"


@dataclass(frozen=True)
class MediaVariant:
    kind: str
    noun: str                      # « 音声ファイル » … utilisé dans les messages
    label: str                     # valeur de la colonne メディアタイプ
    payload: str = DATA_URL
    extensions: FrozenSet[str] = frozenset()
    default_extension: str = ""
    required_mime: Optional[str] = None
    default_mime: Optional[str] = None
    format_aliases: Mapping[str, str] = field(default_factory=dict)
    format_in_message: bool = False
    resource_type: str = "auto"

    def pick_extension(self, requested: Optional[str]) -> str:
        ext = (requested or "").strip().lstrip(".").lower()
        return ext if ext in self.extensions else self.default_extension

    def format_label(self, ext: str) -> str:
        return self.format_aliases.get(ext, ext).upper()


VARIANTS: Dict[str, MediaVariant] = {
    "audio": MediaVariant(
        kind="audio", noun="音声ファイル", label="音声",
        extensions=frozenset({"mp3"}), default_extension="mp3",
        resource_type="video",
    ),
    "video": MediaVariant(
        kind="video", noun="動画ファイル", label="動画",
        extensions=frozenset({"mp4", "webm"}), default_extension="webm",
        format_in_message=True, resource_type="video",
    ),
    "photo": MediaVariant(
        kind="photo", noun="写真ファイル", label="写真",
        extensions=frozenset({"jpg", "jpeg", "png"}), default_extension="jpg",
        format_aliases={"jpeg": "jpg"}, format_in_message=True, resource_type="image",
    ),
    "drawing": MediaVariant(
        kind="drawing", noun="お絵かきファイル", label="お絵かき",
        extensions=frozenset({"png"}), default_extension="png",
        required_mime="image/png", format_in_message=True, resource_type="image",
    ),
    "text": MediaVariant(
        kind="text", noun="テキストファイル", label="テキスト", payload=TEXT,
        extensions=frozenset({"txt"}), default_extension="txt",
        default_mime="text/plain", resource_type="raw",
    ),
}


def parse_data_url(value: str, required_mime: Optional[str] = None) -> Tuple[str, bytes]:
    m = _DATA_URL_RE.match(value or "")
    if not m:
        raise InvalidFormat("無効なData URL形式です。")
    mime, b64 = m.group(1), m.group(2)
    if required_mime and mime != required_mime:
        raise InvalidFormat(f"無効なData URL形式です。{required_mime} である必要があります。",
                            details={"mime": mime})
    try:
        data = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFormat("Base64データをデコードできません。") from e
    return mime, data


def final_file_name(base: str, ext: str) -> str:
    if base.lower().endswith(f".{ext}"):
        return base
    return f"{base}.{ext}"


@dataclass
class SaveResult:
    success: bool
    message: str
    file_id: Optional[int] = None
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    history: Outcome = Outcome.OK
    error: Optional[type] = None

    @property
    def outcome(self) -> Outcome:
        return Outcome.OK if self.success else Outcome.FAILED

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.success:
            out.update(fileId=self.file_id, fileName=self.file_name, fileUrl=self.file_url)
        return out


class MediaSaver:
    def __init__(self, folders: FolderStore, subfolders: SubfolderNameSource,
                 history: HistoryLog, config: RecorderConfig):
        self.folders = folders
        self.subfolders = subfolders
        self.history = history
        self.config = config

    def save(self, kind: str, payload, base_file_name, extension: Optional[str] = None,
             mime_type: Optional[str] = None) -> SaveResult:
        variant = VARIANTS[kind]
        try:
            return self._save(variant, payload, base_file_name, extension, mime_type)
        except RecorderError as e:
            logger.error("save %s failed: %s", kind, e)
            error = type(e)
        except Exception as e:
            logger.exception("save %s failed: %s", kind, e)
            error = type(e)
        return SaveResult(success=False, message=f"{variant.noun}の保存中にエラーが発生しました。",
                          error=error)

    def _save(self, variant: MediaVariant, payload, base_file_name,
              extension: Optional[str], mime_type: Optional[str]) -> SaveResult:
        if not isinstance(payload, str) or not payload:
            raise InvalidArgument(f"{variant.noun}のデータが無効です。")
        if not isinstance(base_file_name, str) or not base_file_name.strip():
            raise InvalidArgument("ファイル名が無効です。")

        # dossier cible : sous-dossier (B1) s'il est renseigné, sinon le dossier parent
        parent = self.folders.resolve(self.config.parent_folder_name)
        sub_name = self.subfolders.read()
        if sub_name:
            target = self.folders.resolve(sub_name, parent)
        else:
            target = parent
            logger.info("No subfolder configured, saving into %s", parent.name)
        path_text = self.folders.display_path(parent, target)
        folder_url = self.folders.folder_url(target)

        if variant.payload == TEXT:
            mime, data = variant.default_mime, payload.encode("utf-8")
        else:
            mime, data = parse_data_url(payload, variant.required_mime)
            mime = mime_type or mime

        ext = variant.pick_extension(extension)
        file_name = final_file_name(base_file_name, ext)
        media = self.folders.write_file(target, file_name, mime, data, variant.label,
                                        resource_type=variant.resource_type)

        fmt = variant.format_label(ext)
        history = self.history.append(file_name, path_text, folder_url, media.url, fmt, variant.label)
        logger.info('%s "%s" saved to %s', variant.kind, file_name, path_text)

        fmt_text = f" ({fmt}形式)" if variant.format_in_message else ""
        return SaveResult(
            success=True,
            message=f"{variant.noun} \"{file_name}\"{fmt_text} をフォルダ「{path_text}」に保存しました。",
            file_id=media.id, file_name=file_name, file_url=media.url, history=history,
        )

    # ─── points d'entrée appelés par le client ──────────────────────────────
    def save_audio_file(self, audio_data_url, base_file_name) -> SaveResult:
        return self.save("audio", audio_data_url, base_file_name)

    def save_video_file(self, video_data_url, base_file_name, extension="webm",
                        mime_type=None) -> SaveResult:
        return self.save("video", video_data_url, base_file_name, extension, mime_type)

    def save_photo_file(self, photo_data_url, base_file_name, extension="jpg") -> SaveResult:
        return self.save("photo", photo_data_url, base_file_name, extension)

    def save_drawing_file(self, drawing_data_url, base_file_name) -> SaveResult:
        return self.save("drawing", drawing_data_url, base_file_name)

    def save_text_file(self, text_data, base_file_name) -> SaveResult:
        return self.save("text", text_data, base_file_name)


def build_saver(session, config: RecorderConfig) -> MediaSaver:
    workbook = Workbook(session)
    return MediaSaver(
        folders=FolderStore(session, config),
        subfolders=SubfolderNameSource(workbook, config),
        history=HistoryLog(workbook, config),
        config=config,
    )
