"""Prompt templates for the AI text service.

Dependencies: langchain_core.prompts
System role: Prompt templates for analysis, field detection and contract drafting
"""

from langchain_core.prompts import ChatPromptTemplate

ANALYSIS_SYSTEM_PROMPT = (
    "You are a legal document analysis expert. Provide thorough but concise analysis."
)

ANALYSIS_PROMPT = ChatPromptTemplate.from_messages([
    ("system", ANALYSIS_SYSTEM_PROMPT),
    (
        "human",
        """Analyze the following legal document and provide:
1. A concise summary
2. Risk analysis (potential issues, missing clauses)
3. Compliance considerations
4. Suggestions for improvement

Document text:
{document_text}

Respond in JSON format ONLY (no markdown, no extra text):
{{
  "summary": "Brief summary of the document",
  "risks": ["risk1", "risk2"],
  "compliance": ["compliance issue 1", "compliance issue 2"],
  "suggestions": ["suggestion 1", "suggestion 2"]
}}""",
    ),
])

FIELD_DETECTION_SYSTEM_PROMPT = (
    "You are a document processing expert. Identify appropriate locations for form fields."
)

FIELD_DETECTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", FIELD_DETECTION_SYSTEM_PROMPT),
    (
        "human",
        """Analyze the following document text and identify where signature fields,
date fields, and text input fields should be placed.

Document text:
{document_text}

Respond in JSON format ONLY (no markdown, no extra text):
{{
  "fields": [
    {{
      "type": "SIGNATURE|DATE|TEXT|INITIAL",
      "label": "Field label",
      "required": true,
      "suggestedPosition": "description of where this field should be placed"
    }}
  ]
}}""",
    ),
])

CONTRACT_SYSTEM_PROMPT = (
    "You are a legal contract drafting expert. Create professional, legally compliant contracts."
)

CONTRACT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", CONTRACT_SYSTEM_PROMPT),
    (
        "human",
        """Generate a {contract_type} contract based on the following requirements:
{prompt}

Create a professional, legally sound document with:
- Proper legal structure and formatting
- Standard clauses for this type of contract
- Placeholders for signatures, dates, and custom fields marked with [FIELD_NAME]
- Clear terms and conditions

The contract should be ready for electronic signature processing.""",
    ),
])
