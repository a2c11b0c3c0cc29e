# feedlot/api/__init__.py
from flask import Blueprint, current_app
from flask_restx import Api
from werkzeug.exceptions import NotFound

from feedlot.exceptions import (AuthenticationError, BusinessError,
                                DataIntegrityError, FeedlotError,
                                InvalidTransitionError, PartialWriteWarning,
                                RepositoryError, ResourceNotFoundError,
                                ValidationError)

api_bp = Blueprint('api', __name__, url_prefix='/api/v1')

api = Api(
    api_bp,
    version='1.0',
    title='Feedlot Health API',
    description='Locate animals and record treatments, deaths and realizations',
    doc='/doc/',
)

# First match wins, so subclasses come before their bases
ERROR_STATUS = (
    (ValidationError, 400),
    (ResourceNotFoundError, 404),
    (AuthenticationError, 401),
    (InvalidTransitionError, 409),
    (BusinessError, 422),
    (PartialWriteWarning, 207),
    (DataIntegrityError, 500),
    (RepositoryError, 503),
)


def status_for(error):
    for error_class, status in ERROR_STATUS:
        if isinstance(error, error_class):
            return status
    return 500


@api.errorhandler(FeedlotError)
def handle_feedlot_error(error):
    """Maps the domain error taxonomy onto HTTP statuses."""
    status = status_for(error)
    if status >= 500:
        current_app.logger.error(f"API {type(error).__name__}: {error.message}")
    else:
        current_app.logger.warning(f"API {type(error).__name__}: {error.message}")
    return error.to_dict(), status


@api.errorhandler(NotFound)
def handle_not_found_error(error):
    """Catches 404 Not Found errors raised in the API."""
    current_app.logger.warning(f"API Not Found error: {error.description}")
    return {'message': error.description or 'Resource not found.'}, 404


from .animals_api import ns as animals_ns
from .auth_api import ns as auth_ns
from .locations_api import ns_lots as lots_ns
from .locations_api import ns_pens as pens_ns
from .reference_api import ns as reference_ns

api.add_namespace(auth_ns)
api.add_namespace(animals_ns)
api.add_namespace(lots_ns)
api.add_namespace(pens_ns)
api.add_namespace(reference_ns)
