import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound, ValidationFailed
from HomeCareAPI.models import AppDocument, MaintenanceLog
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import DocumentCreate, DocumentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_property_document(db: Session, document_id: int, property_id: int) -> AppDocument:
    """
    Look up a document that is being linked to another record of a property.

    Raises:
        ValidationFailed: If the document is missing or belongs to another property.
    """
    doc = db.query(AppDocument).filter(AppDocument.id == document_id).first()
    if not doc or doc.property_id != property_id:
        raise ValidationFailed("Document does not belong to this property")
    return doc


# Get all documents across accessible properties
@router.get("/documents/", response_model=List[DocumentResponse])
def get_documents(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    property_ids = AccessEvaluator(db).accessible_property_ids(user_id)
    if not property_ids:
        return []
    return (
        db.query(AppDocument)
        .filter(AppDocument.property_id.in_(property_ids))
        .order_by(AppDocument.date.desc())
        .all()
    )


# Get documents for specific property
@router.get("/documents/property/{property_id}", response_model=List[DocumentResponse])
def get_property_documents(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    return (
        db.query(AppDocument)
        .filter(AppDocument.property_id == property_id)
        .order_by(AppDocument.date.desc())
        .all()
    )


@router.post("/documents/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def create_document(doc_in: DocumentCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Store a document against a property, optionally linked to a maintenance log.

    Raises:
        HTTPException: 400 if `log_id` belongs to another property.
    """
    AccessEvaluator(db).require_edit_access(user_id, doc_in.property_id)
    if doc_in.log_id is not None:
        log = db.query(MaintenanceLog).filter(MaintenanceLog.id == doc_in.log_id).first()
        if not log or log.property_id != doc_in.property_id:
            raise ValidationFailed("Maintenance log does not belong to this property")

    doc = AppDocument(**doc_in.model_dump(), user_id=user_id)
    db.add(doc)
    db.commit()
    db.refresh(doc)
    logger.info("User %s stored document %s (%d bytes) on property %s", user_id, doc.id, doc.size, doc.property_id)
    return doc


@router.delete("/documents/{document_id}")
def delete_document(document_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    doc = db.query(AppDocument).filter(AppDocument.id == document_id).first()
    if not doc:
        raise NotFound("Document not found")
    AccessEvaluator(db).require_edit_access(user_id, doc.property_id)
    db.delete(doc)
    db.commit()
    return {"message": "Document deleted"}
