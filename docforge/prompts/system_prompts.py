# System and user prompt templates for every pipeline stage.
# - User templates take a single JSON payload rendered by the builder with
#   sorted keys, so identical inputs always give identical prompts.
# - JSON-returning stages spell out the exact schema; the validator rejects
#   anything else and the stage falls back.

# =============================================================================
# DOCUMENT GENERATION
# =============================================================================
DOCUMENT_GENERATION_SYSTEM_PROMPT = (
    "You are an expert author of {document_type} documents. "
    "Using the information provided, write a complete, well-structured {document_type}."
)

DOCUMENT_GENERATION_USER_PROMPT = """Write a {document_type} based on the following source material.
Return the document body only, as plain text or Markdown.

SOURCE:
{payload}
"""

# =============================================================================
# CODE GENERATION
# =============================================================================
CODE_GENERATION_SYSTEM_PROMPT = (
    "You are a senior software engineer. Generate {language} source code that "
    "implements the document you are given."
)

CODE_GENERATION_USER_PROMPT = """Generate {language} source code based on the following {document_type} document.
Return only the code. Do not add explanations outside code comments.

DOCUMENT:
{payload}
"""

# =============================================================================
# CONSISTENCY CHECK
# =============================================================================
CONSISTENCY_CHECK_SYSTEM_PROMPT = (
    "You are an expert in cross-document consistency review. Analyse the documents, "
    "identify inconsistencies between them and propose improvements."
)

CONSISTENCY_CHECK_USER_PROMPT = """Check the following documents for consistency with each other.

Return ONLY strict JSON with exactly this shape:
{{
  "score": <integer 0-100, 100 means fully consistent>,
  "issues": [
    {{"type": "<category>", "description": "<what is inconsistent>", "severity": "<high|medium|low>"}}
  ],
  "suggestions": ["<improvement>"]
}}

DOCUMENTS:
{payload}
"""

# =============================================================================
# QUALITY CHECK (one call per item kind)
# =============================================================================
QUALITY_CHECK_SYSTEM_PROMPT = "You are a software quality review expert."

QUALITY_CHECK_USER_PROMPT = """Review the quality of the following {item}.
Assess consistency, completeness and adherence to best practices, then list
the problems you found and concrete suggestions for improvement.

{item}:
{payload}
"""

# =============================================================================
# WORK ESTIMATION
# =============================================================================
WORK_ESTIMATION_SYSTEM_PROMPT = (
    "You are an expert in software development effort estimation. "
    "Estimate the effort for the project described to you."
)

WORK_ESTIMATION_USER_PROMPT = """Estimate the effort for this project.

PROJECT:
{payload}

Return ONLY strict JSON with exactly this shape:
{{
  "totalHours": <total hours, must equal the sum of breakdown hours>,
  "breakdown": [
    {{"phase": "<phase name>", "hours": <non-negative number>}}
  ]
}}
"""

# =============================================================================
# PROGRESS REPORT
# =============================================================================
PROGRESS_REPORT_SYSTEM_PROMPT = "You are a project manager."

PROGRESS_REPORT_USER_PROMPT = """Analyse the following project progress data and identify the three main
issues or causes of delay. Write one issue per line with no other text.

Overall progress: {overall_progress}%
Phase progress:
{phase_lines}
"""

# =============================================================================
# PROPOSAL CREATION
# =============================================================================
PROPOSAL_CREATION_SYSTEM_PROMPT = (
    "You are an expert author of project proposals. Using the project information "
    "and documents provided, write a persuasive proposal."
)

PROPOSAL_CREATION_USER_PROMPT = """Write a proposal for the project below, following the template's section structure.

PROJECT AND TEMPLATE:
{payload}
"""
