"""
Base for integrations with HTTP APIs.

An integration is a class that wraps a :class:`requests.Session` for a single
remote service. The service's base URL and certificate verification are
taken from the application config, using keys derived from
``Meta.service_name``; e.g. for a service named ``functions``,
``FUNCTIONS_ENDPOINT`` and ``FUNCTIONS_VERIFY``.

Use :meth:`HTTPIntegration.current_session` to get an instance that is
shared for the duration of an application context.
"""

from http import HTTPStatus as status
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urljoin

from flask import Flask
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import logging
from ..context import get_application_config, get_application_global

logger = logging.getLogger(__name__)


class RequestFailed(IOError):
    """The service returned an unexpected status code."""

    def __init__(self, msg: str, data: Optional[Any] = None) -> None:
        """Attach (optional) response data to the exception."""
        super(RequestFailed, self).__init__(msg)
        self.data = data


class BadRequest(RequestFailed):
    """The request was malformed or otherwise improper."""


class RequestUnauthorized(RequestFailed):
    """Client/user is not authenticated."""


class RequestForbidden(RequestFailed):
    """Client/user is not allowed to perform this request."""


class NotFound(RequestFailed):
    """The requested resource does not exist."""


class ConnectionFailed(IOError):
    """Could not connect to the remote service."""


class HTTPIntegration:
    """Encapsulates a connection with a remote HTTP service."""

    class Meta:
        """Configuration for :class:`HTTPIntegration`."""

        service_name = "base"

    EXCEPTIONS = {
        status.BAD_REQUEST: BadRequest,
        status.UNAUTHORIZED: RequestUnauthorized,
        status.FORBIDDEN: RequestForbidden,
        status.NOT_FOUND: NotFound,
    }
    """Exceptions raised for specific response codes."""

    def __init__(self, endpoint: str, verify: bool = True,
                 headers: Optional[Dict[str, str]] = None) -> None:
        """
        Set the endpoint for the service, and configure the session.

        Parameters
        ----------
        endpoint : str
            Base URL for the service.
        verify : bool
            Whether or not SSL certificates should be verified.
        headers : dict
            Headers to send with every request.

        """
        self._endpoint = endpoint if endpoint.endswith('/') \
            else f'{endpoint}/'
        self._verify = verify
        self._session = requests.Session()
        self._retry = Retry(total=5, read=5, connect=5, status=5,
                            backoff_factor=0.5,
                            status_forcelist=[502, 503, 504])
        self._adapter = HTTPAdapter(max_retries=self._retry)
        self._session.mount('http://', self._adapter)
        self._session.mount('https://', self._adapter)
        self._session.headers.update(headers or {})

    @classmethod
    def service_name(cls) -> str:
        return cls.Meta.service_name

    def _path(self, path: str) -> str:
        return urljoin(self._endpoint, path.lstrip('/'))

    def _check_status(self, resp: requests.Response,
                      expected_code: List[int]) -> None:
        if resp.status_code in expected_code:
            return
        try:
            data = resp.json()
        except ValueError:
            data = None
        exception = self.EXCEPTIONS.get(resp.status_code, RequestFailed)
        raise exception(f'{self.service_name()}: unexpected status code'
                        f' {resp.status_code}', data)

    def request(self, method: str, path: str, token: Optional[str] = None,
                expected_code: Union[int, List[int]] = status.OK,
                **kwargs: Any) -> requests.Response:
        """
        Make an HTTP request with error/exception handling.

        Parameters
        ----------
        method : str
            Lowercase HTTP method, e.g. ``post``.
        path : str
            Path relative to the service endpoint.
        token : str
            Bearer token, if the request should be authenticated differently
            than the session.
        expected_code : int or list
            Status code(s) that indicate success.

        Raises
        ------
        :class:`RequestFailed`
            Or one of its children, if the status code is not expected.
        :class:`ConnectionFailed`
            If the service could not be reached.

        """
        if not isinstance(expected_code, list):
            expected_code = [expected_code]
        headers = kwargs.pop('headers', {})
        if token is not None:
            headers['Authorization'] = f'Bearer {token}'
        try:
            resp = getattr(self._session, method)(self._path(path),
                                                   headers=headers,
                                                   verify=self._verify,
                                                   **kwargs)
        except requests.exceptions.ConnectionError as e:
            raise ConnectionFailed(f'{self.service_name()}: could not'
                                   f' connect: {e}') from e
        except requests.exceptions.RetryError as e:
            raise RequestFailed(f'{self.service_name()}: too many retries:'
                                f' {e}') from e
        self._check_status(resp, expected_code)
        return resp

    def json(self, method: str, path: str, token: Optional[str] = None,
             expected_code: Union[int, List[int]] = status.OK,
             **kwargs: Any) -> Tuple[Any, int, Dict[str, str]]:
        """
        Make an HTTP request, and parse the response as JSON.

        Returns
        -------
        object
            Parsed response body.
        int
            Response status code.
        dict
            Response headers.

        """
        resp = self.request(method, path, token, expected_code, **kwargs)
        try:
            data = resp.json()
        except ValueError as e:
            raise RequestFailed(f'{self.service_name()}: could not decode'
                                f' response') from e
        return data, resp.status_code, resp.headers

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters on an application."""
        name = cls.service_name().upper()
        app.config.setdefault(f'{name}_ENDPOINT', 'http://localhost/')
        app.config.setdefault(f'{name}_VERIFY', True)

    @classmethod
    def get_session(cls, app: Optional[Flask] = None) -> 'HTTPIntegration':
        """Get a new session with the service."""
        config = get_application_config(app)
        name = cls.service_name().upper()
        endpoint = config.get(f'{name}_ENDPOINT', 'http://localhost/')
        verify = config.get(f'{name}_VERIFY', True)
        if isinstance(verify, str):
            verify = bool(int(verify))
        logger.debug('Create %s session at endpoint %s', name, endpoint)
        return cls(endpoint, verify=verify)

    @classmethod
    def current_session(cls) -> 'HTTPIntegration':
        """Get or create a session for this context."""
        g = get_application_global()
        if g is None:
            return cls.get_session()
        key = f'{cls.__module__}.{cls.__name__}'
        if key not in g:
            setattr(g, key, cls.get_session())
        return getattr(g, key)
