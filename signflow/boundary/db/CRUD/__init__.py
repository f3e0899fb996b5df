"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from signflow.boundary.db.CRUD import document_crud, signature_crud

    document = await document_crud.get_with_details(db, document_id)
"""

from signflow.boundary.db.CRUD.base_crud import BaseCRUD
from signflow.boundary.db.CRUD.user_crud import UserCRUD, normalize_email, user_crud
from signflow.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from signflow.boundary.db.CRUD.document_field_crud import DocumentFieldCRUD, document_field_crud
from signflow.boundary.db.CRUD.signature_crud import SignatureCRUD, signature_crud
from signflow.boundary.db.CRUD.ai_analysis_crud import AIAnalysisCRUD, ai_analysis_crud
from signflow.boundary.db.CRUD.template_crud import TemplateCRUD, template_crud

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "normalize_email",
    "DocumentCRUD",
    "document_crud",
    "DocumentFieldCRUD",
    "document_field_crud",
    "SignatureCRUD",
    "signature_crud",
    "AIAnalysisCRUD",
    "ai_analysis_crud",
    "TemplateCRUD",
    "template_crud",
]
