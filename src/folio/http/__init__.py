"""Immutable HTTP request and response types for the folio server."""

from folio.http.forms import FormData, UploadFile
from folio.http.headers import Headers
from folio.http.query import QueryParams
from folio.http.request import Request
from folio.http.response import Redirect, Response

__all__ = [
    "FormData",
    "Headers",
    "QueryParams",
    "Redirect",
    "Request",
    "Response",
    "UploadFile",
]
