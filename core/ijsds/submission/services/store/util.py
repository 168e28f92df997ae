"""Utility classes and functions for :mod:`.services.store`."""

from contextlib import contextmanager
from typing import Optional, Generator, Any

from flask import Flask
import sqlalchemy.types as types
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine
from sqlalchemy.orm.session import Session
from flask_sqlalchemy import SQLAlchemy

from ... import logging
from ... import serializer
from ...exceptions import InvalidEvent, NoSuchSubmission
from .exceptions import StoreBaseException, TransactionFailed


class SubmissionSQLAlchemy(SQLAlchemy):
    """SQLAlchemy integration for the submission database."""

    def init_app(self, app: Flask) -> None:
        """Set default configuration."""
        app.config.setdefault(
            'SQLALCHEMY_DATABASE_URI',
            app.config.get('SUBMISSION_DATABASE_URI', 'sqlite://')
        )
        app.config.setdefault('SQLALCHEMY_TRACK_MODIFICATIONS', False)
        options = app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {})
        if not app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
            options.setdefault('json_serializer', serializer.dumps)
            options.setdefault('json_deserializer', serializer.loads)
        super(SubmissionSQLAlchemy, self).init_app(app)


db: SQLAlchemy = SubmissionSQLAlchemy()


logger = logging.getLogger(__name__)


class SQLiteJSON(types.TypeDecorator):
    """A SQLite-friendly JSON data type."""

    impl = types.TEXT
    cache_ok = True

    def process_bind_param(self, value: Optional[Any], dialect: Any) \
            -> Optional[str]:
        """Serialize a dict to JSON."""
        if value is not None:
            value = serializer.dumps(value)
        return value

    def process_result_value(self, value: Optional[str], dialect: Any) \
            -> Optional[Any]:
        """Deserialize JSON content to a dict."""
        if value is not None:
            value = serializer.loads(value)
        return value


# SQLite does not support JSON, so we extend JSON to use our custom data type
# as a variant for the 'sqlite' dialect.
FriendlyJSON = types.JSON().with_variant(SQLiteJSON, 'sqlite')

# Events may be created only microseconds apart, and their identifiers depend
# on the creation timestamp, so fractional seconds must survive a round-trip.
PreciseDateTime = types.DateTime().with_variant(mysql.DATETIME(fsp=6), 'mysql')


_IN_TRANSACTION = "ijsds.in_transaction"


def current_engine() -> Engine:
    """Get/create :class:`.Engine` for this context."""
    return db.engine


def current_session() -> Session:
    """Get/create :class:`.Session` for this context."""
    return db.session()


@contextmanager
def transaction() -> Generator:
    """
    Context manager for database transaction.

    Nested uses join the outermost transaction, which alone commits or rolls
    back.
    """
    session = current_session()
    if session.info.get(_IN_TRANSACTION):
        yield session
        return
    session.info[_IN_TRANSACTION] = True
    try:
        yield session
        session.commit()
    except (StoreBaseException, InvalidEvent, NoSuchSubmission) as e:
        logger.debug('Command failed, rolling back: %s', str(e))
        session.rollback()
        raise   # Propagate store and domain exceptions as they are.
    except Exception as e:
        logger.debug('Command failed, rolling back: %s', str(e))
        session.rollback()
        raise TransactionFailed('Failed to execute transaction') from e
    finally:
        session.info[_IN_TRANSACTION] = False
