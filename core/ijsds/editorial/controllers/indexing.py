"""Controllers for delivering article metadata to indexing services."""

from http import HTTPStatus as status
from typing import Mapping, Optional

from werkzeug.exceptions import BadRequest, ServiceUnavailable

from ijsds.submission import logging
from ijsds.submission.services import Functions
from ijsds.submission.services.integration import RequestFailed, \
    ConnectionFailed

from .util import Agents, Response

logger = logging.getLogger(__name__)


def submit_to_doaj(data: Optional[dict], agents: Agents) -> Response:
    """
    Send metadata for articles to the Directory of Open Access Journals.

    The payload may give the ``status`` of the articles to send; by default,
    everything that has been published.
    """
    data = data or {}
    article_status = data.get('status', 'published')
    if not isinstance(article_status, str):
        raise BadRequest('status must be a string')
    try:
        result = Functions.current_session().submit_to_doaj(article_status)
    except (RequestFailed, ConnectionFailed) as e:
        logger.error('DOAJ submission failed: %s', e)
        raise ServiceUnavailable('Could not submit to DOAJ') from e
    logger.info('%s sent %s articles to DOAJ', agents['creator'],
                article_status)
    return {'status': article_status, 'result': result}, status.OK, {}


def export_ajol_metadata(params: Mapping[str, str],
                         agents: Agents) -> Response:
    """Get metadata for published articles, for African Journals Online."""
    format = params.get('format', 'xml')
    try:
        content = Functions.current_session().export_ajol_metadata(format)
    except ValueError as e:
        raise BadRequest(str(e)) from e
    except (RequestFailed, ConnectionFailed) as e:
        logger.error('AJOL export failed: %s', e)
        raise ServiceUnavailable('Could not export metadata') from e
    return {'format': format, 'content': content}, status.OK, {}
