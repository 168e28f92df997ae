"""Application factory for the editorial API."""

from typing import Any

from flask import Flask, Response, jsonify
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

import ijsds.submission as ev
from ijsds.submission import logging, serializer

from . import routes

logger = logging.getLogger(__name__)


class EditorialJSONProvider(DefaultJSONProvider):
    """Encode response bodies with the submission core's serializer."""

    def dumps(self, obj: Any, **kwargs: Any) -> str:
        return serializer.dumps(obj)


def jsonify_exception(error: HTTPException) -> Response:
    """Render an HTTP error as a JSON document with a ``reason``."""
    exc_resp = error.get_response()
    response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response


def create_web_app() -> Flask:
    """Initialize an instance of the editorial API."""
    app = Flask('ijsds.editorial')
    app.json = EditorialJSONProvider(app)
    app.config.from_pyfile('config.py')
    ev.init_app(app)

    # Callbacks (notifications, DOI registration) are bound on import.
    from ijsds.submission import rules     # noqa: F401

    app.register_blueprint(routes.blueprint)
    app.errorhandler(HTTPException)(jsonify_exception)
    return app
