"""Error taxonomy shared by the store, the generator and the HTTP layer.

Each error carries the HTTP status it maps to; the handlers registered in
``main.create_app`` turn any of them into the ``{"ok": false, "error": ...}``
envelope.
"""
from __future__ import annotations


class ApiError(Exception):
	status_code = 500

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class ValidationError(ApiError):
	status_code = 400


class NotFoundError(ApiError):
	status_code = 404


class ConflictError(ApiError):
	status_code = 409


class DownstreamError(ApiError):
	status_code = 500


class StoreError(DownstreamError):
	pass


class GeneratorError(DownstreamError):
	pass
