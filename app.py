# app.py — Flask + SQLAlchemy : page d'enregistrement + API (médias, réglages, historique, dossiers)
from __future__ import annotations
import os
from typing import Any, Mapping

from flask import Flask, render_template
from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.engine import make_url

from extensions import db, migrate
from recorder.config import load_config
from recorder.folders import configure_cloudinary
from recorder.history import HistoryLog
from recorder.logging_config import setup_logging
from recorder.sheets import Workbook


def _normalize_db_url(uri: str) -> str:
    if not uri:
        return uri
    if uri.startswith("postgres://"):
        uri = "postgresql://" + uri[len("postgres://"):]
    return uri


def _choose_db_uri(app: Flask) -> str:
    env_uri = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
    if env_uri:
        return _normalize_db_url(env_uri)
    os.makedirs(app.instance_path, exist_ok=True)
    sqlite_path = os.path.join(app.instance_path, "recorder.db").replace("\\", "/")
    return f"sqlite:///{sqlite_path}"


def _engine_options(db_uri: str) -> dict:
    if not db_uri.startswith("postgresql"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 280,
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
        "pool_timeout": 30,
        "connect_args": {"sslmode": "require", "connect_timeout": 10},
    }


def create_app(test_config: Mapping[str, Any] | None = None) -> Flask:
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True,
                static_folder="static", template_folder="templates")
    setup_logging(debug=app.debug)

    # --- DB
    if test_config and "SQLALCHEMY_DATABASE_URI" in test_config:
        db_uri = test_config["SQLALCHEMY_DATABASE_URI"]
    else:
        db_uri = _choose_db_uri(app)
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = _engine_options(db_uri)
    try:
        url = make_url(db_uri)
        app.logger.info("DB -> %s", url.render_as_string(hide_password=True))
    except Exception:
        app.logger.info("DB -> %s", db_uri)

    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "supersecret")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["RECORDER"] = load_config()
    # Cloudinary : CLOUDINARY_URL ou CLOUD_NAME + API_KEY + API_SECRET
    configure_cloudinary(os.getenv("CLOUDINARY_CLOUD_NAME"),
                         os.getenv("CLOUDINARY_API_KEY"),
                         os.getenv("CLOUDINARY_API_SECRET"))

    if test_config:
        app.config.update(test_config)

    if app.debug:
        app.config["TEMPLATES_AUTO_RELOAD"] = True
        app.jinja_env.auto_reload = True

    db.init_app(app)
    migrate.init_app(app, db)

    with app.app_context():
        import models  # noqa: F401
        try:
            if db.engine.url.get_backend_name() == "sqlite":
                db.create_all()
            db.session.execute(text("select 1"))
        except Exception as e:
            app.logger.warning("DB warmup failed: %s", e)

    @app.teardown_appcontext
    def _shutdown_session(exc=None):
        db.session.remove()

    # Blueprints API
    from api.media import media_bp
    from api.folders import folders_bp
    from api.settings import settings_bp
    from api.history import history_bp
    app.register_blueprint(media_bp,    url_prefix="/api/media")
    app.register_blueprint(folders_bp,  url_prefix="/api/folders")
    app.register_blueprint(settings_bp, url_prefix="/api/settings")
    app.register_blueprint(history_bp,  url_prefix="/api/history")

    # Page
    @app.route("/")
    def home():
        cfg = app.config["RECORDER"]
        HistoryLog(Workbook(db.session), cfg).ensure_store()
        return render_template("app.html", title=cfg.page_title)

    @app.route("/health")
    def health():
        try:
            db.session.execute(text("select 1"))
        except Exception as e:
            app.logger.error("Health check failed: %s", e)
            return {"status": "db_unavailable"}, 503
        return {"status": "healthy"}, 200

    return app


app = create_app()

if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", "0") in ("1", "true", "True")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)
