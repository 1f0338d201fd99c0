"""Image transport: raw upload bytes in, base64 data URIs out."""
import base64
from typing import Annotated, Optional
from fastapi import UploadFile
from pydantic import BeforeValidator, PlainSerializer

DATA_URI_PREFIX = 'data:image/jpeg;base64,'

def to_data_uri(blob: Optional[bytes]) -> Optional[str]:
    if not blob:
        return None
    return DATA_URI_PREFIX + base64.b64encode(blob).decode('ascii')

def from_data_uri(value):
    # response models are dumped to JSON and validated again before sending
    if isinstance(value, str) and value.startswith(DATA_URI_PREFIX):
        return base64.b64decode(value[len(DATA_URI_PREFIX):])
    return value

ImageBytes = Annotated[
    Optional[bytes],
    BeforeValidator(from_data_uri),
    PlainSerializer(to_data_uri, when_used='json'),
]

def read_upload(upload: Optional[UploadFile]) -> Optional[bytes]:
    # browsers send an empty part when no file was picked
    if upload is None or not upload.filename:
        return None
    data = upload.file.read()
    return data or None
