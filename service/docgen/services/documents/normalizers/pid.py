"""
PRINCE2 Project Initiation Document normalizer.

The PID is twelve nested blocks. Each block is read from its canonical key
(or an alias), and every declared sub-field is filled: lists stay lists,
mappings gain their missing keys, and text gets a visible placeholder.
"""
from typing import Any, Mapping

from docgen.services.documents.normalizers.base import FieldReader, keep_alias, unwrap
from docgen.services.documents.toolkit import as_text, extract_array, extract_value

PROJECT_BOARD = {
    "executive": "[EXECUTIVE]",
    "seniorUser": "[SENIOR USER]",
    "seniorSupplier": "[SENIOR SUPPLIER]",
}
PROJECT_ASSURANCE = {
    "business": "[BUSINESS ASSURANCE]",
    "user": "[USER ASSURANCE]",
    "supplier": "[SUPPLIER ASSURANCE]",
}

LAYOUT = {
    "projectDefinition": {
        "objectives": [],
        "deliverables": [],
        "constraints": [],
        "assumptions": [],
        "dependencies": [],
        "interfaces": [],
        "desiredOutcomes": [],
    },
    "businessCase": {
        "reasons": "Reasons to be defined",
        "businessOptions": [],
        "expectedBenefits": [],
        "expectedDisbenefits": [],
        "timescale": "TBD",
        "costs": {},
        "investmentAppraisal": "Investment appraisal to be defined",
        "majorRisks": [],
    },
    "organizationStructure": {
        "projectBoard": PROJECT_BOARD,
        "projectManager": "[PROJECT MANAGER]",
        "projectAssurance": PROJECT_ASSURANCE,
        "teamManagers": [],
        "projectSupport": "[PROJECT SUPPORT]",
    },
    "qualityManagementApproach": {
        "qualityMethod": "Quality method to be defined",
        "qualityStandards": [],
        "qualityResponsibilities": "Quality responsibilities to be defined",
        "qualityCriteria": [],
        "qualityRecords": [],
    },
    "configurationManagementApproach": {
        "purpose": "Configuration management purpose to be defined",
        "procedure": "Procedure to be defined",
        "toolsAndTechniques": [],
        "issueAndChangeControl": "Issue and change control to be defined",
    },
    "riskManagementApproach": {
        "procedure": "Risk procedure to be defined",
        "timingOfRiskManagementActivities": "TBD",
        "toolsAndTechniques": [],
        "reporting": "Risk reporting to be defined",
        "rolesAndResponsibilities": [],
        "riskTolerances": {},
        "riskCategories": [],
        "riskRegisterFormat": "TBD",
    },
    "communicationManagementApproach": {
        "procedure": "Communication procedure to be defined",
        "toolsAndTechniques": [],
        "reporting": "Reporting to be defined",
        "stakeholderAnalysis": [],
        "rolesAndResponsibilities": "TBD",
        "methods": [],
        "frequency": "TBD",
    },
    "projectPlan": {
        "stages": [],
        "milestones": [],
        "schedule": "Schedule to be defined",
        "dependencies": [],
        "resources": {},
        "budget": {},
    },
    "projectControls": {
        "stages": [],
        "tolerances": {},
        "reportingArrangements": "Reporting arrangements to be defined",
    },
    "tailoring": {
        "approach": "Tailoring approach to be defined",
        "justification": "Tailoring justification to be defined",
    },
}


def _block(fields: FieldReader, name: str) -> dict:
    layout = LAYOUT[name]
    found = fields.value(name)
    if isinstance(found, Mapping):
        source = dict(found)
    elif found in (None, ""):
        source = {}
    else:
        # A bare paragraph lands in the block's first text field
        first_text = next((key for key, default in layout.items() if isinstance(default, str)), None)
        if first_text:
            source = {first_text: as_text(found)}
        else:
            source = {next(iter(layout)): found}

    block = dict(source)
    for key, default in layout.items():
        path = f"{name}.{key}"
        value = source.get(key)
        if value in (None, "", [], {}):
            value = extract_value(fields.data, *fields.aliases.get(path, ()))
        if isinstance(default, list):
            block[key] = extract_array(value)
        elif isinstance(default, dict):
            if isinstance(value, Mapping):
                merged = dict(value)
                for sub_key, sub_default in default.items():
                    if merged.get(sub_key) in (None, ""):
                        merged[sub_key] = sub_default
                        fields.defaulted.add(f"{path}.{sub_key}")
                block[key] = merged
            elif value not in (None, "", []):
                block[key] = value
            else:
                block[key] = fields._fallback(path, default)
        else:
            text = as_text(value).strip() if value is not None else ""
            block[key] = text or fields._fallback(path, default)
    return block


def normalize_pid(raw: Any) -> dict:
    data, text = unwrap(raw)
    fields = FieldReader(data, "pid")

    definition = _block(fields, "projectDefinition")
    scope = definition.get("scope") if isinstance(definition.get("scope"), Mapping) else {}
    definition["scope"] = {
        **scope,
        "inScope": extract_array(
            extract_value(scope, "inScope", "included") or fields.value("projectDefinition.scope.inScope")
        ),
        "outOfScope": extract_array(
            extract_value(scope, "outOfScope", "excluded") or fields.value("projectDefinition.scope.outOfScope")
        ),
    }

    business_case = _block(fields, "businessCase")
    keep_alias(business_case, "expectedDisbenefits", "expectedDisBenefits")

    return fields.finish({
        "executiveSummary": fields.text("executiveSummary", text or "Executive summary to be defined"),
        "projectBackground": fields.text("projectBackground", "Project background to be defined"),
        "projectDefinition": definition,
        "businessCase": business_case,
        "organizationStructure": _block(fields, "organizationStructure"),
        "qualityManagementApproach": _block(fields, "qualityManagementApproach"),
        "configurationManagementApproach": _block(fields, "configurationManagementApproach"),
        "riskManagementApproach": _block(fields, "riskManagementApproach"),
        "communicationManagementApproach": _block(fields, "communicationManagementApproach"),
        "projectPlan": _block(fields, "projectPlan"),
        "projectControls": _block(fields, "projectControls"),
        "tailoring": _block(fields, "tailoring"),
    })
