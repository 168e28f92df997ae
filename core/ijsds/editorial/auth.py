"""
Authentication and authorization for the editorial API.

Requests carry a bearer JWT issued by the platform's auth service, signed
with ``JWT_SECRET`` (HS256). The ``sub`` claim is the user id. Roles are not
taken from the token: they come from the user's stored :class:`.Profile`, so
that granting or revoking the editor role takes effect immediately.
"""

from functools import wraps
from typing import Any, Callable, Dict, Optional

import jwt
from flask import request
from werkzeug.exceptions import Unauthorized, Forbidden

from ijsds.submission import logging, User, Client
from ijsds.submission.domain.agent import Agent
from ijsds.submission.context import get_application_config
from ijsds.submission.services import store

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'


def get_token() -> str:
    """Get the bearer token from the ``Authorization`` header."""
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        raise Unauthorized('Missing bearer token')
    return token.strip()


def decode(token: str, secret: str) -> Dict[str, Any]:
    """Verify and decode a token; raises :class:`.Unauthorized` if bad."""
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise Unauthorized('Token has expired') from e
    except jwt.InvalidTokenError as e:
        logger.debug('Rejected token: %s', e)
        raise Unauthorized('Invalid token') from e


def agents_for(claims: Dict[str, Any]) -> Dict[str, Optional[Agent]]:
    """
    Get the agents responsible for events created in this request.

    Users without a profile are treated as authors.
    """
    user_id = claims.get('sub')
    if not user_id:
        raise Unauthorized('Token has no subject')
    profile = store.get_profile(str(user_id))
    if profile is None:
        creator = User(str(user_id), email=claims.get('email', ''),
                       roles=[User.AUTHOR])
    else:
        creator = profile.as_agent()
    client: Optional[Client] = None
    if claims.get('client_id'):
        client = Client(str(claims['client_id']))
    return {'creator': creator, 'proxy': None, 'client': client}


def authenticate() -> None:
    """Attach the authenticated agents to the current request."""
    secret = get_application_config().get('JWT_SECRET')
    claims = decode(get_token(), secret)
    request.agents = agents_for(claims)
    logger.debug('Authenticated %s', request.agents['creator'].native_id)


def scoped(role: str) -> Callable:
    """Only allow users with ``role`` on their profile to use a route."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            creator = request.agents['creator']
            if role not in creator.roles:
                logger.debug('User %s lacks role %s', creator.native_id,
                             role)
                raise Forbidden(f'Requires the {role} role')
            return func(*args, **kwargs)
        return wrapper
    return decorator
