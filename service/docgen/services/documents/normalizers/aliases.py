"""
Historical field names per document type.

``FIELD_ALIASES[document_type][canonical_path]`` lists the alternative key
paths older generators and API clients have used for the same field. The
canonical path is always tried first; aliases are tried in order.
"""

FIELD_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    "charter": {
        "executiveSummary": ("executive_summary", "summary", "overview"),
        "projectOverview": ("project_overview", "description", "projectDescription", "background"),
        "projectManager": ("project_manager", "manager", "governance.projectManager"),
        "sponsor": ("projectSponsor", "project_sponsor", "governance.sponsor"),
        "businessObjectives": ("business_objectives", "objectives", "goals", "projectObjectives"),
        "scope.inScope": ("scope.in_scope", "scope.included", "inScope", "in_scope"),
        "scope.outOfScope": ("scope.out_of_scope", "scope.excluded", "outOfScope", "out_of_scope"),
        "scope.assumptions": ("assumptions",),
        "scope.constraints": ("constraints",),
        "deliverables": ("keyDeliverables", "key_deliverables"),
        "milestones": ("keyMilestones", "key_milestones", "timeline.milestones"),
        "stakeholders": ("keyStakeholders", "key_stakeholders", "stakeholderAnalysis"),
        "budget.total": ("budget.totalBudget", "budget.amount", "totalBudget", "total_budget"),
        "budget.breakdown": ("budget.items", "budget.allocation", "budgetBreakdown"),
        "budget.contingency": ("contingency",),
        "timeline.startDate": ("timeline.start", "startDate", "start_date"),
        "timeline.endDate": ("timeline.end", "endDate", "end_date"),
        "timeline.duration": ("duration", "timeline.totalDuration"),
        "risks": ("keyRisks", "key_risks", "risksAndMitigation", "risks_and_mitigation"),
        "successCriteria": ("success_criteria", "acceptanceCriteria", "acceptance_criteria", "kpis"),
        "approvals": ("signoffs", "sign_offs", "approval"),
        "rawText": ("raw_text", "text"),
    },
    "business_case": {
        "executiveSummary": ("executive_summary", "summary"),
        "reasons": ("businessReasons", "business_reasons", "reason", "background", "rationale"),
        "businessOptions": ("business_options", "options"),
        "recommendedOption": ("recommended_option", "recommendation"),
        "expectedBenefits": ("expected_benefits", "benefits"),
        "expectedDisbenefits": ("expectedDisBenefits", "expected_disbenefits", "disbenefits", "disBenefits", "dis_benefits"),
        "timescale": ("timeScale", "time_scale", "timeline", "duration"),
        "costs": ("cost", "costBreakdown", "cost_breakdown", "budget"),
        "investmentAppraisal": ("investment_appraisal", "appraisal", "financialAnalysis"),
        "majorRisks": ("major_risks", "risks", "keyRisks"),
    },
    "risk_register": {
        "executiveSummary": ("executive_summary", "summary", "overview"),
        "risks": ("riskRegister", "risk_register", "register", "items"),
        "categories": ("riskCategories", "risk_categories"),
        "methodology": ("approach", "riskManagementApproach", "risk_methodology"),
        "reviewFrequency": ("review_frequency", "reviewCycle"),
        "governance": ("escalation", "escalationProcedure", "roles"),
        "documentOwner": ("document_owner", "owner"),
        "approvalStatus": ("approval_status", "status"),
        "rawText": ("raw_text", "text"),
    },
    "project_plan": {
        "executiveSummary": ("executive_summary", "summary", "overview"),
        "objectives": ("projectObjectives", "goals"),
        "phases": ("stages", "projectPhases", "project_phases", "timeline.phases"),
        "milestones": ("keyMilestones", "key_milestones", "timeline.milestones"),
        "workBreakdown": ("wbs", "workBreakdownStructure", "work_breakdown_structure"),
        "deliverables": ("keyDeliverables", "key_deliverables"),
        "resources": ("resourcePlan", "resource_plan", "team"),
        "dependencies": ("projectDependencies",),
        "criticalPath": ("critical_path",),
        "budget": ("budgetPlan", "budget_plan", "costs"),
        "risks": ("keyRisks", "risk_management", "riskManagement"),
        "qualityPlan": ("quality", "quality_plan", "qualityManagement"),
        "communicationPlan": ("communication", "communication_plan", "communications"),
        "rawText": ("raw_text", "text"),
    },
    "backlog": {
        "productVision": ("product_vision", "vision"),
        "items": ("backlogItems", "backlog_items", "userStories", "user_stories", "stories", "backlog"),
        "epics": ("features", "themes"),
        "sprints": ("sprintPlan", "sprint_plan", "iterations"),
        "sprintLengthDays": ("sprint_length_days", "sprintLength", "sprintDuration"),
        "metrics": ("backlogMetrics", "backlog_metrics", "stats"),
        "prioritizationCriteria": ("prioritization_criteria", "priorityCriteria"),
        "definitionOfReady": ("definition_of_ready", "dor"),
        "definitionOfDone": ("definition_of_done", "dod"),
        "roadmap": ("releasePlan", "release_plan", "releases"),
    },
    "pid": {
        "executiveSummary": ("executive_summary",),
        "projectBackground": ("projectDefinition.background", "background", "project_background"),
        "projectDefinition.objectives": ("objectives",),
        "projectDefinition.scope.inScope": ("projectDefinition.scope.included", "scope.included", "scope.inScope"),
        "projectDefinition.scope.outOfScope": ("projectDefinition.scope.excluded", "scope.excluded", "scope.outOfScope"),
        "projectDefinition.deliverables": ("deliverables",),
        "projectDefinition.constraints": ("constraints",),
        "projectDefinition.assumptions": ("assumptions",),
        "projectDefinition.dependencies": ("dependencies",),
        "projectDefinition.interfaces": ("interfaces",),
        "projectDefinition.desiredOutcomes": ("desiredOutcomes", "desired_outcomes"),
        "businessCase.expectedDisbenefits": ("businessCase.expectedDisBenefits", "businessCase.disbenefits"),
        "businessCase.businessOptions": ("businessCase.options",),
        "businessCase.expectedBenefits": ("businessCase.benefits",),
        "organizationStructure": ("organisationStructure", "organization_structure", "projectOrganization"),
        "qualityManagementApproach": ("quality_management_approach", "qualityManagement"),
        "configurationManagementApproach": ("configuration_management_approach", "configurationManagement"),
        "riskManagementApproach": ("risk_management_approach", "riskManagement"),
        "communicationManagementApproach": ("communication_management_approach", "communicationManagement"),
        "projectPlan": ("project_plan",),
        "projectControls": ("project_controls", "controls"),
        "tailoring": ("tailoringOfPrince2",),
    },
    "comparable_projects": {
        "executiveSummary": ("executive_summary", "summary"),
        "analysisMethodology": ("methodology", "analysis_methodology"),
        "selectionCriteria": ("selection_criteria", "criteria"),
        "projects": ("comparableProjects", "comparable_projects", "comparables", "items"),
        "keyFindings": ("key_findings", "findings"),
        "lessonsLearned": ("lessons_learned", "lessons"),
        "recommendations": ("recommendation",),
        "rawContent": ("raw_content", "rawText", "text"),
    },
    "technical_landscape": {
        "executiveSummary": ("executive_summary", "summary", "overview"),
        "currentState": ("current_state", "as_is", "asIs", "sections.current_state"),
        "techStack": ("tech_stack", "technologies", "technologyStack"),
        "architecture": ("system_architecture", "systemArchitecture"),
        "integrations": ("interfaces", "integration_points"),
        "infrastructure": ("hosting", "infrastructure_details"),
        "security": ("security_architecture", "securityArchitecture"),
        "performance": ("performance_requirements", "performanceRequirements"),
        "technicalDebt": ("technical_debt", "debt"),
        "futureState": ("future_state", "roadmap", "to_be", "toBe", "sections.future_state"),
        "gapAnalysis": ("gap_analysis", "gaps", "sections.gap_analysis"),
        "recommendations": ("recommendation", "sections.recommendations"),
        "risks": ("technicalRisks", "technical_risks", "sections.risks"),
    },
    "communication_plan": {
        "executiveSummary": ("executive_summary", "overview", "summary"),
        "objectives": ("communication_objectives", "communicationObjectives"),
        "stakeholders": (
            "stakeholderAnalysis.stakeholders",
            "stakeholder_analysis.internal_stakeholders",
            "stakeholderAnalysis",
            "stakeholder_analysis",
        ),
        "methods": ("communication_methods", "communicationMethods", "channels", "communication_procedures.methods"),
        "schedule": (
            "communication_schedule",
            "communicationSchedule",
            "matrix",
            "timing_scheduling.communication_calendar",
        ),
        "raci": ("raci_matrix", "raciMatrix", "responsibilities", "roles_responsibilities.raci_matrix"),
        "keyMessages": ("key_messages", "messages"),
        "risks": ("communication_risks", "communicationRisks"),
        "metrics": ("success_metrics", "successMetrics", "kpis"),
        "escalation": ("escalation_process", "escalationProcess", "escalationPaths", "communication_procedures.escalation_paths"),
        "feedbackMechanisms": ("feedback_mechanisms", "feedback", "communication_procedures.feedback_mechanisms"),
    },
    "quality_management": {
        "introduction": ("overview", "purpose", "executiveSummary"),
        "qualityPolicy": ("policy", "quality_policy"),
        "standards": ("quality_standards", "qualityStandards"),
        "processes": ("quality_processes", "qualityProcesses"),
        "metrics": ("quality_metrics", "qualityMetrics", "kpis"),
        "assurance": ("quality_assurance", "qualityAssurance", "qa"),
        "control": ("quality_control", "qualityControl", "qc"),
        "reviews": ("review_procedures", "reviewProcedures"),
        "roles": ("responsibilities", "rolesAndResponsibilities"),
        "tools": ("quality_tools", "qualityTools"),
        "improvement": ("continuous_improvement", "continuousImprovement"),
    },
    "kanban": {
        "overview": ("board", "boardOverview", "board_overview"),
        "columns": ("board.columns", "lanes", "stages"),
        "workInProgress": ("work_in_progress", "wip"),
        "metrics": ("flowMetrics", "flow_metrics"),
        "cycleTime": ("cycle_time",),
        "throughput": ("throughputHistory",),
        "blockedItems": ("blocked_items", "blockers"),
        "teamCapacity": ("team_capacity", "capacity"),
        "upcomingWork": ("upcoming_work", "nextUp"),
        "backlogHealth": ("backlog_health",),
    },
    "company_pack": {
        "basics": ("company", "companyBasics", "profile"),
        "products": ("productsServices.products", "products_and_services", "offerings"),
        "services": ("productsServices.services",),
        "competitors": ("competitorAnalysis", "competitor_analysis", "competition"),
        "marketPosition": ("market", "market_position", "industryAnalysis"),
        "domain": ("website", "url", "basics.website"),
        "metrics": ("financials", "financialMetrics", "financial_metrics"),
        "digitalPresence": ("digital_presence", "digital", "online"),
        "people": ("team", "teamAndCulture"),
        "recentActivity": ("recent_activity", "news", "activity"),
        "insights": ("strategicInsights", "strategic_insights", "swot"),
        "metadata": ("packMetadata", "meta"),
    },
}
