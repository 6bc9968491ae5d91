"""
Application Exceptions
Client errors raised by the validation and service layers
"""


class SalesBookError(Exception):
    """Base class for errors reported back to the caller"""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'message': self.message}


class ValidationFailed(SalesBookError):
    """Malformed or out-of-range input, carrying every offending field"""

    def __init__(self, errors, message='Validation failed'):
        super().__init__(message)
        self.errors = errors

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class NotFound(SalesBookError):
    """Reference to a record that does not exist"""
    status_code = 404

    def __init__(self, resource, identifier):
        super().__init__(f'{resource} {identifier} not found')
        self.resource = resource
        self.identifier = identifier


class Conflict(SalesBookError):
    """Operation refused because of the current state of the store"""
    status_code = 409
