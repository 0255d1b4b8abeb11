import base64, binascii, re
from typing import Tuple
from urllib.parse import unquote_to_bytes

# data:[<mime>][;param=value]*[;base64],<payload>
DATA_URI_RE = re.compile(r"^data:([^;,]*)((?:;[^;,]+)*),(.*)$", re.IGNORECASE | re.DOTALL)

class DataUriError(Exception):
    pass

def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    m = DATA_URI_RE.match(uri.strip())
    if not m:
        raise DataUriError("Unsupported data URI")
    mime, params, payload = m.groups()
    mime = mime or "text/plain"
    if params.lower().endswith(";base64"):
        try:
            return mime, base64.b64decode(payload, validate=False)
        except binascii.Error as e:
            raise DataUriError(f"Bad base64 payload: {e}") from e
    return mime, unquote_to_bytes(payload)
