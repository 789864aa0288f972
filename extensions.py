# extensions.py — instances partagées (évite les imports circulaires avec app.py)
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
