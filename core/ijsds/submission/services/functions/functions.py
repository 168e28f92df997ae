"""
Integration with the platform's serverless handlers.

Sending e-mail, minting DOIs with Zenodo, and delivering metadata to
indexing services (DOAJ, AJOL) are all done by handlers that run on the
hosted platform. Each handler is invoked with a ``POST`` of a JSON body to
``{FUNCTIONS_ENDPOINT}<handler name>``, authenticated with the service key.
"""

from http import HTTPStatus as status
from typing import Any, Dict, NamedTuple, Optional

from flask import Flask

from ... import logging
from ...context import get_application_config
from ..integration import HTTPIntegration, RequestFailed

logger = logging.getLogger(__name__)


class DOIRegistration(NamedTuple):
    """The outcome of registering a DOI with Zenodo."""

    doi: str
    """The version DOI."""

    concept_doi: Optional[str] = None
    """DOI that always resolves to the latest version of the record."""

    zenodo_id: Optional[str] = None
    zenodo_url: Optional[str] = None
    is_update: bool = False
    """``True`` if a new version of an existing record was published."""


class Functions(HTTPIntegration):
    """Encapsulates a connection with the platform's serverless handlers."""

    class Meta:
        """Configuration for :class:`Functions`."""

        service_name = "functions"

    SEND_EMAIL = 'send-email-notification'
    GENERATE_DOI = 'generate-zenodo-doi'
    SUBMIT_DOAJ = 'bulk-submit-doaj'
    EXPORT_AJOL = 'export-ajol-metadata'

    def invoke(self, name: str, body: Dict[str, Any]) -> Any:
        """Invoke a handler by name, and get its JSON response."""
        logger.debug('Invoke %s', name)
        data, _, _ = self.json('post', name, json=body,
                               expected_code=[status.OK, status.CREATED,
                                              status.ACCEPTED])
        return data

    def send_email(self, to: str, subject: str, html_content: str,
                   notification_type: Optional[str] = None,
                   user_id: Optional[str] = None,
                   submission_id: Optional[int] = None,
                   review_id: Optional[str] = None) -> None:
        """
        Send an e-mail.

        Parameters
        ----------
        to : str
            Recipient address.
        subject : str
        html_content : str
            Body of the message, as HTML.
        notification_type : str
            Category of the message, used by the platform for reporting.
        user_id : str
            Platform identifier of the recipient, if known.
        submission_id : int
        review_id : str

        """
        body: Dict[str, Any] = {'to': to, 'subject': subject,
                                'htmlContent': html_content}
        optional = {'type': notification_type, 'userId': user_id,
                    'submissionId': submission_id, 'reviewId': review_id}
        body.update({k: v for k, v in optional.items() if v is not None})
        self.invoke(self.SEND_EMAIL, body)

    def register_doi(self, submission_id: int,
                     existing_doi: Optional[str] = None) -> DOIRegistration:
        """
        Mint a DOI for an accepted article by depositing it with Zenodo.

        If the article already has a DOI, a new version of the Zenodo record
        is published instead.

        Raises
        ------
        :class:`.RequestFailed`
            If the handler did not report success.

        """
        data = self.invoke(self.GENERATE_DOI,
                           {'submissionId': submission_id,
                            'existingDoi': existing_doi})
        if not data or not data.get('success') or not data.get('doi'):
            raise RequestFailed(f'DOI registration failed for {submission_id}',
                                data)
        zenodo_id = data.get('zenodo_id')
        return DOIRegistration(
            doi=data['doi'],
            concept_doi=data.get('concept_doi'),
            zenodo_id=str(zenodo_id) if zenodo_id is not None else None,
            zenodo_url=data.get('zenodo_url'),
            is_update=bool(data.get('is_update',
                                    data.get('is_new_version', False)))
        )

    def submit_to_doaj(self, status: str = 'published') -> Dict[str, Any]:
        """Submit metadata for all articles in ``status`` to DOAJ."""
        data: Dict[str, Any] = self.invoke(self.SUBMIT_DOAJ,
                                           {'status': status})
        return data

    def export_ajol_metadata(self, format: str = 'xml') -> str:
        """Get metadata for published articles in the AJOL dialect."""
        if format not in ('xml', 'json'):
            raise ValueError(f'Unsupported format: {format}')
        data = self.invoke(self.EXPORT_AJOL, {'format': format})
        return data['content'] if isinstance(data, dict) else data

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters on an application."""
        app.config.setdefault('FUNCTIONS_ENDPOINT',
                              'http://localhost:54321/functions/v1/')
        app.config.setdefault('FUNCTIONS_VERIFY', True)
        app.config.setdefault('FUNCTIONS_SERVICE_KEY', '')

    @classmethod
    def get_session(cls, app: Optional[Flask] = None) -> 'Functions':
        """Get a new session, authenticated with the service key."""
        config = get_application_config(app)
        key = config.get('FUNCTIONS_SERVICE_KEY', '')
        verify = config.get('FUNCTIONS_VERIFY', True)
        if isinstance(verify, str):
            verify = bool(int(verify))
        return cls(config.get('FUNCTIONS_ENDPOINT',
                              'http://localhost:54321/functions/v1/'),
                   verify=verify,
                   headers={'Authorization': f'Bearer {key}', 'apikey': key})
