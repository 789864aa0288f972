"""Shared fixtures: in-memory database app and a fake Cloudinary."""
from datetime import datetime, timezone

import pytest

from app import create_app
from extensions import db
from recorder.config import RecorderConfig
from recorder.folders import FolderStore
from recorder.history import HistoryLog
from recorder.pipeline import MediaSaver
from recorder.settings_sheet import SubfolderNameSource
from recorder.sheets import Workbook

FIXED_NOW = datetime(2024, 5, 1, 3, 4, 5, tzinfo=timezone.utc)


class FakeCloud:
    """Records create_folder / upload calls instead of reaching Cloudinary."""

    def __init__(self):
        self.folders = []
        self.uploads = []
        self.fail_folders = False
        self.fail_uploads = False

    def create_folder(self, path, **options):
        if self.fail_folders:
            raise RuntimeError("folder quota exceeded")
        self.folders.append(path)
        return {"success": True, "path": path, "name": path.rsplit("/", 1)[-1]}

    def upload(self, file, **options):
        if self.fail_uploads:
            raise RuntimeError("upload refused")
        data = file.read()
        public_id = f"{options['folder']}/{options['filename_override']}_{len(self.uploads) + 1}"
        self.uploads.append({"data": data, **options})
        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/test/{options['resource_type']}/upload/{public_id}",
            "bytes": len(data),
        }


@pytest.fixture()
def cloud(monkeypatch):
    fake = FakeCloud()
    monkeypatch.setattr("cloudinary.api.create_folder", fake.create_folder)
    monkeypatch.setattr("cloudinary.uploader.upload", fake.upload)
    return fake


@pytest.fixture()
def config():
    return RecorderConfig(public_base_url="http://recorder.test", time_zone="Asia/Tokyo")


@pytest.fixture()
def app(cloud, config):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "RECORDER": config,
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def workbook(app):
    return Workbook(db.session)


@pytest.fixture()
def history(workbook, config):
    return HistoryLog(workbook, config, clock=lambda: FIXED_NOW)


@pytest.fixture()
def folders(app, config):
    return FolderStore(db.session, config)


@pytest.fixture()
def saver(folders, workbook, history, config):
    return MediaSaver(folders, SubfolderNameSource(workbook, config), history, config)


@pytest.fixture()
def settings_sheet(workbook, config):
    """Settings sheet with a blank subfolder cell and every mode visible."""
    sheet = workbook.insert_sheet(config.settings_sheet_name)
    sheet.set_value("B1", "")
    for row in range(1, 6):
        sheet.set_value(f"E{row}", 1)
    db.session.commit()
    return sheet
