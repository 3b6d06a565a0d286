"""
Image upload storage
Flat directory of uploaded files named after the client filename
"""
import logging
import os

import aiofiles

logger = logging.getLogger(__name__)


class ImageStorage:
    """
    Writes uploaded images into a single directory
    
    Same-named uploads overwrite each other; content is stored
    verbatim and never inspected.
    """
    
    URL_PREFIX = "/images"
    
    def __init__(self, directory: str):
        self.directory = directory
    
    def ensure_directory(self) -> None:
        """Create the upload directory if absent"""
        os.makedirs(self.directory, exist_ok=True)
    
    @staticmethod
    def clean_filename(filename: str) -> str:
        """Strip any directory components sent by the client"""
        return os.path.basename(filename.replace("\\", "/"))
    
    async def save(self, filename: str, content: bytes) -> str:
        """
        Persist an uploaded file
        
        Args:
            filename: Client supplied filename
            content: Full file bytes
            
        Returns:
            Path-relative URL the file is served under
        """
        name = self.clean_filename(filename)
        if not name:
            raise ValueError(f"invalid upload filename: {filename!r}")
        
        self.ensure_directory()
        path = os.path.join(self.directory, name)
        
        async with aiofiles.open(path, 'wb') as f:
            await f.write(content)
        
        image_url = f"{self.URL_PREFIX}/{name}"
        logger.info(f"Uploaded file: {image_url}")
        return image_url
