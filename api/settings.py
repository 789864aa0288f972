# api/settings.py — réglages lus par la page (modes affichés) et édition de la feuille de réglages
from flask import Blueprint, current_app, jsonify, request

from extensions import db
from recorder.settings_sheet import ModeSettingsReader, SettingsWriter, SubfolderNameSource
from recorder.sheets import Workbook

settings_bp = Blueprint("settings", __name__)


@settings_bp.get("/modes")
def get_mode_settings():
    cfg = current_app.config["RECORDER"]
    return jsonify(ModeSettingsReader(Workbook(db.session), cfg).read().to_dict())


@settings_bp.get("")
def get_settings():
    cfg = current_app.config["RECORDER"]
    book = Workbook(db.session)
    return jsonify({
        "subfolder": SubfolderNameSource(book, cfg).read(),
        "modes": ModeSettingsReader(book, cfg).read().to_dict(),
    })


@settings_bp.put("")
def update_settings():
    cfg = current_app.config["RECORDER"]
    data = request.get_json(silent=True) or {}
    subfolder = data.get("subfolder")
    modes = data.get("modes")
    if subfolder is not None and not isinstance(subfolder, str):
        return jsonify({"ok": False, "error": "bad_subfolder"}), 400
    if modes is not None and (not isinstance(modes, dict)
                              or any(k not in cfg.mode_keys for k in modes)):
        return jsonify({"ok": False, "error": "bad_modes"}), 400

    book = Workbook(db.session)
    SettingsWriter(book, cfg).update(subfolder=subfolder, modes=modes)
    return jsonify({"ok": True, "modes": ModeSettingsReader(book, cfg).read().to_dict()})
