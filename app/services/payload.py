import base64
import binascii
import gzip
import zlib

from app.core.exceptions import InvalidInputError


def decompress_payload(encoded: str) -> bytes:
    """
    Decodes the transport encoding used by the browser extension.

    The extension gzips the rendered PDF and base64-encodes the result so it
    fits in a JSON body.

    Args:
        encoded: Base64 text of a gzip stream.

    Returns:
        The raw document bytes.

    Raises:
        InvalidInputError: If the text is not base64 or not a gzip stream.
    """
    try:
        compressed = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInputError(f"Content is not valid base64: {e}") from e

    try:
        document = gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise InvalidInputError(f"Decompression failed: {e}") from e

    if not document:
        raise InvalidInputError("Content is empty after decompression.")
    return document
