from sqlalchemy import MetaData
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_apscheduler import APScheduler
from flask_socketio import SocketIO

# Stable index/key names so Alembic autogenerate diffs stay clean
# (check constraints are named explicitly on the models)
metadata = MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
})

db = SQLAlchemy(metadata=metadata)
migrate = Migrate(compare_type=True)
bcrypt = Bcrypt()
jwt = JWTManager()
cors = CORS()
# Only runs the read-only ledger audit; auctions close lazily on each bid
scheduler = APScheduler()

socketio = SocketIO(
    cors_credentials=True,
    logger=False,
    engineio_logger=False,
)
