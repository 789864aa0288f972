# api/history.py — lecture de la feuille d'historique
from flask import Blueprint, current_app, jsonify

from extensions import db
from recorder.history import HistoryLog
from recorder.sheets import Workbook

history_bp = Blueprint("history", __name__)


@history_bp.get("")
def list_history():
    log = HistoryLog(Workbook(db.session), current_app.config["RECORDER"])
    return jsonify(log.records())
