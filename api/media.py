# api/media.py — enregistrement des médias envoyés par la page (data URL base64 ou texte)
from flask import Blueprint, current_app, jsonify, request

from extensions import db
from recorder.errors import http_status_for
from recorder.pipeline import build_saver

media_bp = Blueprint("media", __name__)


def _saver():
    return build_saver(db.session, current_app.config["RECORDER"])


def _reply(result):
    status = 201 if result.success else http_status_for(result.error)
    return jsonify(result.to_dict()), status


def _payload():
    return request.get_json(silent=True) or {}


# ─── AUDIO (MP3) ─────────────────────────────────────────────────────────────
@media_bp.post("/audio")
def save_audio():
    data = _payload()
    return _reply(_saver().save_audio_file(data.get("dataUrl"), data.get("baseFileName")))


# ─── VIDÉO (MP4/WebM) ────────────────────────────────────────────────────────
@media_bp.post("/video")
def save_video():
    data = _payload()
    return _reply(_saver().save_video_file(
        data.get("dataUrl"), data.get("baseFileName"),
        extension=data.get("extension") or "webm",
        mime_type=data.get("mimeType"),
    ))


# ─── PHOTO (JPG/PNG) ─────────────────────────────────────────────────────────
@media_bp.post("/photo")
def save_photo():
    data = _payload()
    return _reply(_saver().save_photo_file(
        data.get("dataUrl"), data.get("baseFileName"),
        extension=data.get("extension") or "jpg",
    ))


# ─── DESSIN (PNG) ────────────────────────────────────────────────────────────
@media_bp.post("/drawing")
def save_drawing():
    data = _payload()
    return _reply(_saver().save_drawing_file(data.get("dataUrl"), data.get("baseFileName")))


# ─── TEXTE (TXT) ─────────────────────────────────────────────────────────────
@media_bp.post("/text")
def save_text():
    data = _payload()
    return _reply(_saver().save_text_file(data.get("text"), data.get("baseFileName")))
