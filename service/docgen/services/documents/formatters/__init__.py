# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Per-document-type formatters and the registry that maps types to them."""
import logging
from typing import Dict, List, Type

from docgen.services.documents.formatters.backlog import BacklogFormatter
from docgen.services.documents.formatters.base import BaseFormatter
from docgen.services.documents.formatters.business_case import BusinessCaseFormatter
from docgen.services.documents.formatters.charter import CharterFormatter
from docgen.services.documents.formatters.communication_plan import CommunicationPlanFormatter
from docgen.services.documents.formatters.company_pack import CompanyPackFormatter
from docgen.services.documents.formatters.comparable_projects import ComparableProjectsFormatter
from docgen.services.documents.formatters.kanban import KanbanFormatter
from docgen.services.documents.formatters.pid import PIDFormatter
from docgen.services.documents.formatters.project_plan import ProjectPlanFormatter
from docgen.services.documents.formatters.quality_management import QualityManagementFormatter
from docgen.services.documents.formatters.risk_register import RiskRegisterFormatter
from docgen.services.documents.formatters.technical_landscape import TechnicalLandscapeFormatter

logger = logging.getLogger(__name__)

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    formatter.document_type: formatter
    for formatter in (
        CharterFormatter,
        BusinessCaseFormatter,
        RiskRegisterFormatter,
        ProjectPlanFormatter,
        BacklogFormatter,
        PIDFormatter,
        ComparableProjectsFormatter,
        TechnicalLandscapeFormatter,
        CommunicationPlanFormatter,
        QualityManagementFormatter,
        KanbanFormatter,
        CompanyPackFormatter,
    )
}

TITLES: Dict[str, str] = {document_type: formatter.title for document_type, formatter in FORMATTERS.items()}


def has_formatter(document_type: str) -> bool:
    return document_type in FORMATTERS


def get_formatter(document_type: str) -> BaseFormatter:
    """New formatter instance for ``document_type``.

    Raises:
        KeyError: If no formatter is registered for the type
    """
    formatter = FORMATTERS.get(document_type)
    if formatter is None:
        logger.warning(f"[formatters] No formatter registered for '{document_type}'")
        raise KeyError(document_type)
    return formatter()


def available_document_types() -> List[str]:
    return list(FORMATTERS)


def document_title(document_type: str) -> str:
    """Display name for a type; unknown types get a title-cased version of the key."""
    return TITLES.get(document_type) or document_type.replace("_", " ").title()


__all__ = [
    "FORMATTERS",
    "TITLES",
    "BaseFormatter",
    "available_document_types",
    "document_title",
    "get_formatter",
    "has_formatter",
    "BacklogFormatter",
    "BusinessCaseFormatter",
    "CharterFormatter",
    "CommunicationPlanFormatter",
    "CompanyPackFormatter",
    "ComparableProjectsFormatter",
    "KanbanFormatter",
    "PIDFormatter",
    "ProjectPlanFormatter",
    "QualityManagementFormatter",
    "RiskRegisterFormatter",
    "TechnicalLandscapeFormatter",
]
