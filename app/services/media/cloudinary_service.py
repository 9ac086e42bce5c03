from dataclasses import dataclass

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings, config
from app.core.logging import get_logger
from app.services.media.exceptions import MediaUploadError

logger = get_logger(__name__)

LISTINGS_FOLDER = "listings"
UNIVERSITIES_FOLDER = "universities"


@dataclass(frozen=True)
class UploadResult:
    url: str
    public_id: str


def configure_cloudinary(settings: Settings) -> None:
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )


class CloudinaryService:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        configure_cloudinary(settings)

    async def upload(self, file: UploadFile, folder: str) -> UploadResult:
        """
        Uploads a file to the image host.

        :param file: Uploaded file from the request.
        :param folder: Destination folder on the image host.
        :return: Secure URL and public id of the stored asset.
        :raises MediaUploadError: If the upload fails or returns no asset.
        """
        contents = await file.read()
        if not contents:
            raise MediaUploadError(f"File '{file.filename}' is empty.")

        try:
            # the SDK is blocking, keep it off the event loop
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                contents,
                folder=folder,
                resource_type="auto",
            )
        except CloudinaryError as e:
            raise MediaUploadError(f"Upload of '{file.filename}' failed: {e}") from e

        if not result or "secure_url" not in result:
            raise MediaUploadError("Upload failed: no result")

        logger.info("Uploaded %s to %s as %s", file.filename, folder, result["public_id"])
        return UploadResult(url=result["secure_url"], public_id=result["public_id"])

    @classmethod
    async def get_dependency(cls) -> "CloudinaryService":
        return cls(config)
