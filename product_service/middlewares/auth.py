"""
JWT Authentication and Authorization Middleware for Product Service
Provides bearer-token authentication and role-based access control
"""

import jwt
from functools import wraps
from flask import request, g, current_app
import logging

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'ADMIN'
ROLE_USER = 'USER'
ROLE_PREMIUM_USER = 'PREMIUM_USER'

ALL_ROLES = (ROLE_USER, ROLE_PREMIUM_USER, ROLE_ADMIN)

MSG_TOKEN_EXPIRED = 'Access token has expired'
MSG_TOKEN_INVALID = 'Invalid access token'
MSG_TOKEN_MISSING = 'Authentication token missing'


class AuthError(Exception):
    """Custom authentication error"""
    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def unauthorized_response(message):
    """401 body for requests without a usable identity"""
    logger.warning(f'Unauthorized request: {request.method} {request.path} ({message})')
    return {
        'status': 401,
        'error': 'Unauthorized',
        'message': message
    }, 401


def forbidden_response():
    """403 body for authenticated callers lacking a role"""
    return {
        'detail': 'Access Denied',
        'description': 'You are not authorized to access this resource',
        'instance': request.path
    }, 403


def get_token_from_request():
    """Extract JWT token from Authorization header"""
    auth_header = request.headers.get('Authorization', '')

    if not auth_header:
        return None

    parts = auth_header.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        raise AuthError(MSG_TOKEN_INVALID)

    return parts[1]


def decode_jwt(token):
    """Decode and validate JWT token"""
    config = current_app.config
    options = {}
    kwargs = {}
    if config.get('JWT_ISSUER'):
        kwargs['issuer'] = config['JWT_ISSUER']
    if config.get('JWT_AUDIENCE'):
        kwargs['audience'] = config['JWT_AUDIENCE']
    else:
        options['verify_aud'] = False

    try:
        return jwt.decode(
            token,
            config['JWT_SECRET'],
            algorithms=[config['JWT_ALGORITHM']],
            options=options,
            **kwargs
        )
    except jwt.ExpiredSignatureError:
        raise AuthError(MSG_TOKEN_EXPIRED)
    except jwt.InvalidTokenError as e:
        logger.warning(f'Invalid token: {str(e)}')
        raise AuthError(MSG_TOKEN_INVALID)


def normalize_roles(claim):
    """Turn a roles claim into a set of bare role names (ROLE_ prefix stripped)"""
    if not claim:
        return set()
    if isinstance(claim, str):
        claim = claim.split(',')
    elif not isinstance(claim, (list, tuple)):
        logger.warning(f'Ignoring roles claim of type {type(claim).__name__}')
        return set()

    roles = set()
    for role in claim:
        role = str(role).strip().upper()
        if role.startswith('ROLE_'):
            role = role[len('ROLE_'):]
        if role:
            roles.add(role)
    return roles


def require_auth(f):
    """
    Decorator to require valid JWT authentication
    Attaches user info to g.current_user
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            token = get_token_from_request()
            if not token:
                return unauthorized_response(MSG_TOKEN_MISSING)

            payload = decode_jwt(token)
        except AuthError as e:
            return unauthorized_response(e.message)

        user_id = payload.get('sub') or payload.get('id') or payload.get('user_id')
        if not user_id:
            logger.warning('Invalid token: Missing user ID')
            return unauthorized_response(MSG_TOKEN_INVALID)

        g.current_user = {
            'id': user_id,
            'email': payload.get('email'),
            'roles': normalize_roles(payload.get('roles'))
        }

        logger.debug(f'Authentication successful for user: {user_id}')
        return f(*args, **kwargs)

    return decorated_function


def require_roles(*required_roles):
    """
    Decorator to require any one of the given roles
    Usage: @require_roles(ROLE_ADMIN) or @require_roles(*ALL_ROLES)
    """
    def decorator(f):
        @wraps(f)
        @require_auth
        def decorated_function(*args, **kwargs):
            user = g.current_user
            user_roles = user['roles']

            if not user_roles.intersection(required_roles):
                logger.warning(
                    f'Authorization failed: User {user["id"]} lacks required roles. '
                    f'Required: {required_roles}, Has: {sorted(user_roles)}'
                )
                return forbidden_response()

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_admin(f):
    """
    Decorator to require admin role
    Convenience wrapper around require_roles(ROLE_ADMIN)
    """
    return require_roles(ROLE_ADMIN)(f)


def get_current_user():
    """
    Get current authenticated user from Flask g object
    Returns None if not authenticated
    """
    return getattr(g, 'current_user', None)
