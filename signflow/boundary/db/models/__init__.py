"""
Database models package.

Exports:
  - UserModel, UserRole: Identity rows and capability enum
  - DocumentModel, DocumentStatus: Document rows and workflow status enum
  - DocumentFieldModel, FieldType: Field layout rows
  - SignatureModel, SignatureStatus: Signature request rows
  - AIAnalysisModel: Derived analysis rows
  - TemplateModel: Reusable templates

Dependencies: sqlalchemy, signflow.boundary.db.base
System role: Database model definitions for domain entities
"""

from signflow.boundary.db.models.user_model import UserModel, UserRole
from signflow.boundary.db.models.document_model import DocumentModel, DocumentStatus
from signflow.boundary.db.models.document_field_model import DocumentFieldModel, FieldType
from signflow.boundary.db.models.signature_model import SignatureModel, SignatureStatus
from signflow.boundary.db.models.ai_analysis_model import AIAnalysisModel
from signflow.boundary.db.models.template_model import TemplateModel

__all__ = [
    "UserModel",
    "UserRole",
    "DocumentModel",
    "DocumentStatus",
    "DocumentFieldModel",
    "FieldType",
    "SignatureModel",
    "SignatureStatus",
    "AIAnalysisModel",
    "TemplateModel",
]
