from fastapi import APIRouter, File, Form, UploadFile

from middleware.auth import CurrentUser
from services.storage import store_document

router = APIRouter(prefix="/api", tags=["documents"])


@router.post("/documents", status_code=201)
async def upload_document(
    user: CurrentUser,
    file: UploadFile = File(..., description="PDF, JPEG or PNG document"),
    folder: str = Form("documents"),
):
    """Store a document and return the URL to keep on the customer or analysis record."""
    content = await file.read()
    url = store_document(folder, file.filename or "", file.content_type, content)
    return {"url": url, "fileName": file.filename, "size": len(content)}
