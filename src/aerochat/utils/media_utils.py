# Copyright 2025 - Oumi
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import base64
import mimetypes
from pathlib import Path
from typing import Optional, Union

from aerochat.core.types.conversation import MediaAttachment
from aerochat.utils.logging import logger

_FILE_URL_PREFIX = "file://"
_SUPPORTED_MEDIA_PREFIXES = ("image/", "video/")


def is_supported_media_type(mime_type: Optional[str]) -> bool:
    """Checks if the MIME type is an image or a video."""
    return bool(mime_type) and str(mime_type).lower().startswith(
        _SUPPORTED_MEDIA_PREFIXES
    )


def decode_media_bytes(data: bytes, mime_type: str) -> Optional[MediaAttachment]:
    """Encodes raw media bytes as an attachment.

    Args:
        data: Raw media bytes.
        mime_type: MIME type of the media.

    Returns:
        Optional[MediaAttachment]: The attachment, or None if the media is not an
            image or a video, or is empty.
    """
    if not is_supported_media_type(mime_type):
        logger.debug(f"Ignoring unsupported media type: {mime_type}")
        return None
    if not data:
        logger.debug("Ignoring empty media payload.")
        return None
    return MediaAttachment(
        data=base64.b64encode(data).decode("ascii"), mime_type=mime_type
    )


def load_media_attachment(
    media_filepath: Union[str, Path], mime_type: Optional[str] = None
) -> Optional[MediaAttachment]:
    """Loads an image or video file as an attachment.

    Args:
        media_filepath: A file path of an image or video.
        mime_type: MIME type of the file. Guessed from the file name if not given.

    Returns:
        Optional[MediaAttachment]: The attachment, or None if the file is not an
            image or a video.

    Raises:
        ValueError: If the path is empty, doesn't exist, or is not a file.
    """
    if not media_filepath:
        raise ValueError("Empty media file path.")

    if isinstance(media_filepath, str) and media_filepath.lower().startswith(
        _FILE_URL_PREFIX
    ):
        media_filepath = media_filepath[len(_FILE_URL_PREFIX) :]

    media_filepath = Path(media_filepath).expanduser()
    if not media_filepath.is_file():
        raise ValueError(
            f"Media path is not a file: {media_filepath}"
            if media_filepath.exists()
            else f"Media path doesn't exist: {media_filepath}"
        )

    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(media_filepath.name)
    if mime_type is None or not is_supported_media_type(mime_type):
        logger.debug(f"Ignoring unsupported media file: {media_filepath}")
        return None

    return decode_media_bytes(media_filepath.read_bytes(), mime_type)
