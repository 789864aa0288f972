# api/folders.py — consultation des dossiers (cible des liens de l'historique)
from flask import Blueprint, jsonify, request
from sqlalchemy import func
from extensions import db
from models import Folder, MediaFile

folders_bp = Blueprint("folders", __name__)


def _folder_dict(f: Folder, counts=None):
    return {
        "id": f.id,
        "name": f.name,
        "parent_id": f.parent_id,
        "path": f.cloud_path,
        "created_at": (f.created_at.isoformat() if hasattr(f.created_at, "isoformat") else str(f.created_at)),
        "count": int((counts or {}).get(f.id, 0)),
    }


def _file_dict(m: MediaFile):
    return {
        "id": m.id,
        "name": m.name,
        "mime_type": m.mime_type,
        "media_type": m.media_type,
        "size": m.size,
        "url": m.url,
        "created_at": m.created_at.isoformat(),
    }


def _counts():
    return dict(db.session.query(MediaFile.folder_id, func.count(MediaFile.id))
                .group_by(MediaFile.folder_id).all())


@folders_bp.get("/list")
def list_folders():
    qtxt = (request.args.get("q") or "").strip().lower()
    q = Folder.query
    if qtxt:
        q = q.filter(func.lower(Folder.name).contains(qtxt))
    counts = _counts()
    return jsonify([_folder_dict(f, counts) for f in q.order_by(Folder.id.asc()).all()])


@folders_bp.get("/<int:folder_id>")
def show_folder(folder_id):
    f = db.get_or_404(Folder, folder_id)
    counts = _counts()
    out = _folder_dict(f, counts)
    out["children"] = [_folder_dict(c, counts) for c in f.children]
    out["files"] = [_file_dict(m) for m in f.files]
    return jsonify(out)
