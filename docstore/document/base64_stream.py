import base64
import binascii
from typing import BinaryIO, Iterator

from ..utilities.provider_error import BadRequestError


CHUNK_SIZE = 255 * 1024
""" Matches GridFS's default chunk size. Must stay a multiple of 4 to keep base64 quanta whole. """

_WHITESPACE = b" \t\r\n"

def iter_base64_decoded(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
	""" Decodes a base64 encoded stream chunk by chunk, so the whole payload is never held in memory.
	Whitespace (e.g. line breaks from MIME-style encoders) is ignored. Raises BadRequestError on invalid input. """
	pending = b""
	while True:
		chunk = stream.read(chunk_size)
		if not chunk:
			break
		if isinstance(chunk, str):
			chunk = chunk.encode("ascii", errors="replace")

		pending += chunk.translate(None, _WHITESPACE)
		# Only decode whole 4-character quanta, carry the remainder over
		usable_length = len(pending) - (len(pending) % 4)
		if usable_length:
			yield _decode(pending[:usable_length])
			pending = pending[usable_length:]

	if pending:
		# A trailing partial quantum means the input was truncated
		yield _decode(pending)

def _decode(data: bytes) -> bytes:
	try:
		return base64.b64decode(data, validate=True)
	except (binascii.Error, ValueError) as e:
		raise BadRequestError(f"File content must be base64 encoded. Reason: {e}") from e
