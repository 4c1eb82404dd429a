# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Standardized exception classes for consistent error responses."""
from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base exception for API errors with standardized response format."""

    def __init__(self, code: str, message: str, status_code: int = 400, details: dict | None = None):
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details or {}
            }
        )


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "identifier": identifier}
        )


class RenderFailedError(APIError):
    """PDF rendering failed; the caller may retry."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            code="RENDER_FAILED",
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details or {}
        )


class InternalServerError(APIError):
    """Internal server error (for unexpected errors)."""

    def __init__(self, message: str = "An internal error occurred", details: dict | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details or {}
        )
