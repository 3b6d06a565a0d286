"""
Image upload API endpoint
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.datastructures import UploadFile
import logging

from app.database import get_image_storage
from app.schemas.chapter import UploadResponse
from app.services.image_storage import ImageStorage

router = APIRouter(tags=["uploads"])
logger = logging.getLogger(__name__)


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    storage: ImageStorage = Depends(get_image_storage)
):
    """
    Upload an image
    
    - Reads the multipart "image" file fully into memory
    - Writes it under its own filename, overwriting any previous file
    - Returns the URL to attach to the chapter in a later update
    
    A missing "image" part, or one sent as a plain text field,
    is a bad request.
    """
    
    form = await request.form()
    image = form.get("image")
    
    if not isinstance(image, UploadFile) or not image.filename:
        logger.warning("Upload request without an image file")
        raise HTTPException(status_code=400, detail="no such file: image")
    
    content = await image.read()
    
    try:
        image_url = await storage.save(image.filename, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error(f"Failed to store upload {image.filename}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
    
    return UploadResponse(imageURL=image_url)
