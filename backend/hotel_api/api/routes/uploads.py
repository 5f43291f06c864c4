from fastapi import APIRouter, Depends, File, Request, UploadFile

from hotel_api.api.deps import get_identity, get_settings
from hotel_api.core.config import Settings
from hotel_api.core.errors import ValidationError
from hotel_api.services.storage import LocalFileStore

router = APIRouter()


def get_file_store(request: Request, settings: Settings = Depends(get_settings)) -> LocalFileStore:
    base_url = settings.public_base_url or str(request.base_url)
    return LocalFileStore(settings.upload_dir, base_url, settings.upload_max_bytes)


@router.post("", dependencies=[Depends(get_identity)])
def upload_image(image: UploadFile | None = File(None), store: LocalFileStore = Depends(get_file_store)):
    if image is None:
        raise ValidationError("No file uploaded")
    # read one byte past the limit so oversize files are rejected without buffering them whole
    data = image.file.read(store.max_bytes + 1)
    url = store.save(image.filename or "", image.content_type, data)
    return {"success": True, "url": url}
