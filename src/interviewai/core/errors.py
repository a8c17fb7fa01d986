from __future__ import annotations


class NotFoundError(ValueError):
    pass


class ConflictError(ValueError):
    pass


class InvalidUploadError(ValueError):
    pass


class UploadTooLargeError(InvalidUploadError):
    pass
