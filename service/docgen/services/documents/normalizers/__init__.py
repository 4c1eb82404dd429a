# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Shape normalizers: loosely-shaped input in, canonical structure out."""
import logging
from typing import Any, Callable, Dict

from docgen.services.documents.normalizers.backlog import normalize_backlog
from docgen.services.documents.normalizers.business_case import normalize_business_case
from docgen.services.documents.normalizers.charter import normalize_charter
from docgen.services.documents.normalizers.communication_plan import normalize_communication_plan
from docgen.services.documents.normalizers.company_pack import normalize_company_pack
from docgen.services.documents.normalizers.comparable_projects import normalize_comparable_projects
from docgen.services.documents.normalizers.kanban import normalize_kanban
from docgen.services.documents.normalizers.pid import normalize_pid
from docgen.services.documents.normalizers.project_plan import normalize_project_plan
from docgen.services.documents.normalizers.quality_management import normalize_quality_management
from docgen.services.documents.normalizers.risk_register import normalize_risk_register
from docgen.services.documents.normalizers.technical_landscape import normalize_technical_landscape

logger = logging.getLogger(__name__)

NORMALIZERS: Dict[str, Callable[[Any], dict]] = {
    "charter": normalize_charter,
    "business_case": normalize_business_case,
    "risk_register": normalize_risk_register,
    "project_plan": normalize_project_plan,
    "backlog": normalize_backlog,
    "pid": normalize_pid,
    "comparable_projects": normalize_comparable_projects,
    "technical_landscape": normalize_technical_landscape,
    "communication_plan": normalize_communication_plan,
    "quality_management": normalize_quality_management,
    "kanban": normalize_kanban,
    "company_pack": normalize_company_pack,
}


def normalize(document_type: str, raw: Any) -> dict:
    """
    Canonical structure for ``document_type``. Never raises: if the input
    trips a normalizer, the default skeleton for the type is returned.

    Unknown types pass dict input through unchanged (anything else becomes
    ``{}``) so callers can still render a generic document.
    """
    normalizer = NORMALIZERS.get(document_type)
    if normalizer is None:
        logger.warning(f"[normalizer] No normalizer registered for '{document_type}', passing content through")
        return dict(raw) if isinstance(raw, dict) else {}
    try:
        return normalizer(raw)
    except Exception as e:
        logger.error(f"[normalizer] {document_type} normalization failed, using defaults: {e}", exc_info=True)
        return normalizer(None)


__all__ = [
    "NORMALIZERS",
    "normalize",
    "normalize_backlog",
    "normalize_business_case",
    "normalize_charter",
    "normalize_communication_plan",
    "normalize_company_pack",
    "normalize_comparable_projects",
    "normalize_kanban",
    "normalize_pid",
    "normalize_project_plan",
    "normalize_quality_management",
    "normalize_risk_register",
    "normalize_technical_landscape",
]
