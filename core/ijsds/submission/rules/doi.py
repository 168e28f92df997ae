"""Register a DOI with Zenodo when a manuscript is accepted."""

from typing import Iterable, Optional

from .. import logging
from ..context import get_application_config
from ..domain.event import Event, AcceptSubmission, RegisterDOI
from ..domain.submission import Submission
from ..domain.agent import Agent
from ..services import Functions
from ..services.integration import RequestFailed, ConnectionFailed
from ..tasks import is_async

logger = logging.getLogger(__name__)


@AcceptSubmission.bind()
@is_async
def register_doi(event: AcceptSubmission, before: Submission,
                 after: Submission, creator: Agent,
                 task_id: Optional[str] = None,
                 **kwargs) -> Iterable[Event]:
    """
    Mint a DOI for the accepted article.

    If registration fails, the editors can still set a DOI by hand; the
    acceptance itself stands.
    """
    if not auto_register_is_enabled():
        return []
    functions = Functions.current_session()
    try:
        registration = functions.register_doi(after.submission_id,
                                              existing_doi=after.doi)
    except (RequestFailed, ConnectionFailed) as e:
        logger.warning('DOI registration failed for submission %s: %s',
                       after.submission_id, e)
        return []
    logger.info('Registered DOI %s for submission %s', registration.doi,
                after.submission_id)
    return [RegisterDOI(creator=creator,
                        doi=registration.doi,
                        concept_doi=registration.concept_doi,
                        zenodo_id=registration.zenodo_id,
                        zenodo_url=registration.zenodo_url)]


def auto_register_is_enabled() -> bool:
    return bool(int(get_application_config().get('AUTO_REGISTER_DOI', '0')))
