# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from fastapi import APIRouter
import logging

logger = logging.getLogger(__name__)

from . import health, pdf

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(pdf.router)
