# seed.py — initialise le classeur et le dossier parent
# Usage : python seed.py [--sample-history]
#   crée la feuille de réglages (B1 vide, E1:E5 = 1), la feuille d'historique,
#   le dossier parent sur Cloudinary, puis affiche le chemin et l'URL du dossier.
import argparse
import logging

from app import app
from extensions import db
from recorder.folders import FolderStore
from recorder.history import HistoryLog
from recorder.settings_sheet import SettingsWriter, SubfolderNameSource
from recorder.sheets import Workbook

logger = logging.getLogger("seed")


def main(sample_history: bool = False, flask_app=None) -> None:
    flask_app = flask_app or app
    cfg = flask_app.config["RECORDER"]
    with flask_app.app_context():
        book = Workbook(db.session)
        SettingsWriter(book, cfg).ensure_sheet()
        db.session.commit()

        history = HistoryLog(book, cfg)
        history.ensure_store()
        logger.info("History sheet ready")

        store = FolderStore(db.session, cfg)
        parent = store.resolve(cfg.parent_folder_name)
        logger.info('Parent folder: "%s" URL: %s', parent.name, store.folder_url(parent))

        sub = SubfolderNameSource(book, cfg).read()
        if sub:
            logger.info('Subfolder: "%s"', sub)
        else:
            logger.info("No subfolder configured")

        if sample_history:
            dummy = "https://res.cloudinary.com/demo/raw/upload/sample"
            history.append("test_audio.mp3", parent.name, store.folder_url(parent), dummy, "MP3", "音声")
            history.append("test_video.mp4", parent.name, store.folder_url(parent), dummy, "MP4", "動画")
            logger.info("Sample history rows written")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialise settings/history sheets and the parent folder")
    parser.add_argument("--sample-history", action="store_true", help="append two sample history rows")
    args = parser.parse_args()
    main(sample_history=args.sample_history)
