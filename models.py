# models.py — Modèles SQLAlchemy
# Folder / MediaFile : arborescence miroir des dossiers Cloudinary + fichiers enregistrés
# Sheet / SheetCell / SheetColumn : classeur (feuille de réglages + feuille d'historique)
from datetime import datetime
from extensions import db


class Folder(db.Model):
    __tablename__ = "folder"
    id         = db.Column(db.Integer, primary_key=True)
    # pas d'unicité : deux dossiers du même nom sont tolérés, le premier gagne
    name       = db.Column(db.String(255), nullable=False, index=True)
    parent_id  = db.Column(db.Integer, db.ForeignKey("folder.id"), nullable=True, index=True)
    cloud_path = db.Column(db.String(600), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    children   = db.relationship("Folder", backref=db.backref("parent", remote_side=[id]),
                                 lazy=True, order_by="Folder.id")
    files      = db.relationship("MediaFile", backref="folder", lazy=True,
                                 order_by="MediaFile.id")


class MediaFile(db.Model):
    __tablename__ = "media_file"
    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(255), nullable=False)
    mime_type  = db.Column(db.String(120), nullable=False)
    size       = db.Column(db.Integer, nullable=False, default=0)
    media_type = db.Column(db.String(40), nullable=False)
    public_id  = db.Column(db.String(255), nullable=False)
    url        = db.Column(db.String(600), nullable=False)
    folder_id  = db.Column(db.Integer, db.ForeignKey("folder.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Sheet(db.Model):
    __tablename__ = "sheet"
    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(120), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class SheetCell(db.Model):
    __tablename__ = "sheet_cell"
    __table_args__ = (db.UniqueConstraint("sheet_id", "row_no", "col_no", name="uq_sheet_cell_pos"),)
    id       = db.Column(db.Integer, primary_key=True)
    sheet_id = db.Column(db.Integer, db.ForeignKey("sheet.id"), nullable=False, index=True)
    row      = db.Column("row_no", db.Integer, nullable=False)
    col      = db.Column("col_no", db.Integer, nullable=False)
    value    = db.Column(db.JSON, nullable=True)
    bold     = db.Column(db.Boolean, default=False, nullable=False)


class SheetColumn(db.Model):
    __tablename__ = "sheet_column"
    __table_args__ = (db.UniqueConstraint("sheet_id", "col_no", name="uq_sheet_column_col"),)
    id       = db.Column(db.Integer, primary_key=True)
    sheet_id = db.Column(db.Integer, db.ForeignKey("sheet.id"), nullable=False, index=True)
    col      = db.Column("col_no", db.Integer, nullable=False)
    width    = db.Column(db.Integer, nullable=False)
