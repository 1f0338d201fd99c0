"""Failure outcomes raised by the catalog, cart and order services.

Each error carries the HTTP status it maps to; the translation into a
response body happens in ``storefront.main``.
"""


class StoreError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StoreError):
    status_code = 400
    default_message = 'Invalid request'


class InvalidInput(ValidationError):
    default_message = 'Invalid input'


class InvalidStatus(ValidationError):
    default_message = 'Invalid status'


class DuplicateKey(StoreError):
    status_code = 400
    default_message = 'Duplicate entry'


class HasDependents(StoreError):
    status_code = 400
    default_message = 'Record is still referenced'


class MissingImage(StoreError):
    status_code = 400
    default_message = 'Image file is required'


class MissingCategory(StoreError):
    status_code = 400
    default_message = 'Category is required. Please select a category or provide a category name.'


class NotFound(StoreError):
    status_code = 404
    default_message = 'Not found'


class OrderCreationFailed(StoreError):
    default_message = 'Failed to create order'


class StorageFailure(StoreError):
    default_message = 'Storage failure'
