from datetime import datetime, timedelta
from typing import Optional

import jwt
from pytz import UTC

DEFAULT_SECRET = 'foosecret'


def generate_token(user_id: str, email: str = '',
                   client_id: Optional[str] = None, expires: int = 36000,
                   secret: str = DEFAULT_SECRET) -> str:
    """Issue a token the way the platform's auth service does."""
    start = datetime.now(UTC)
    claims = {
        'sub': user_id,
        'email': email,
        'iat': start,
        'exp': start + timedelta(seconds=expires),
    }
    if client_id is not None:
        claims['client_id'] = client_id
    return jwt.encode(claims, secret, algorithm='HS256')


def auth_header(user_id: str, **kwargs) -> dict:
    return {'Authorization': f'Bearer {generate_token(user_id, **kwargs)}'}
