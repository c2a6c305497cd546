# wikiportraits/core/use_cases/upload_image.py
import structlog

from wikiportraits.core.domain.exceptions import (
    DomainError,
    InvalidRequestError,
    MediaWikiAPIError,
    UploadWarningError,
)
from wikiportraits.core.domain.models import UploadResult, WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

DEFAULT_UPLOAD_COMMENT = "Uploaded via WikiPortraits"


class UploadImage:
    """
    Use Case: Uploads one image file to Wikimedia Commons.

    Steps:
    1. Fetches a CSRF token for the logged-in user.
    2. Posts the file with its description page (action=upload).
    3. Turns Commons warnings (duplicate, exists...) into `UploadWarningError`.
    4. Looks up the page id of the new file, which the upload response lacks
       and which structured-data edits need (MediaInfo id = M<pageid>).
    """

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(
        self,
        auth: WikimediaCredentials,
        filename: str,
        content: bytes,
        text: str = "",
        comment: str = "",
    ) -> UploadResult:
        with tracer.start_as_current_span("use_case.upload_image") as span:
            span.set_attribute("app.filename", filename)
            span.set_attribute("app.size_bytes", len(content or b""))

            if not content or not filename:
                raise InvalidRequestError("File and filename are required")

            logger.info("upload_started", filename=filename, size=len(content), user=auth.username)

            try:
                token = await self.commons.get_csrf_token(auth)
                upload = await self.commons.upload(
                    auth, token, filename, content, text or "", comment or DEFAULT_UPLOAD_COMMENT
                )

                result = upload.get("result")
                if result == "Warning":
                    warnings = upload.get("warnings") or {}
                    logger.warning("upload_warning", filename=filename, warnings=list(warnings))
                    raise UploadWarningError(warnings)
                if result != "Success":
                    raise MediaWikiAPIError("upload-failed", f"Upload failed: {result}")

                stored_name = upload.get("filename") or filename
                page_id = await self.commons.get_page_id(f"File:{stored_name}")
                image_info = upload.get("imageinfo") or {}

                logger.info("upload_succeeded", filename=stored_name, page_id=page_id)
                return UploadResult(
                    filename=stored_name,
                    url=image_info.get("url"),
                    descriptionUrl=image_info.get("descriptionurl"),
                    pageId=page_id,
                )

            except DomainError:
                raise
            except Exception as e:
                logger.error("upload_failed", filename=filename, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected upload failure: {str(e)}")
