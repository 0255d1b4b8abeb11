import time, requests
from typing import Optional
from .log import log
from .models import CompletionNotice
from .settings import settings

HEADERS = {"Content-Type": "application/json"}

class DeliveryFailed(RuntimeError):
    pass

def notify_with_backoff(
    evaluation_url: str,
    notice: CompletionNotice,
    attempts: Optional[int] = None,
    initial_delay: Optional[float] = None,
    timeout: Optional[float] = None,
    post=requests.post,
    sleep=time.sleep,
) -> None:
    """POST ``notice`` as JSON until a 2xx arrives or attempts run out.

    The delay between attempts starts at ``initial_delay`` and doubles after
    every sleep. Only the status class counts; the response body is ignored.
    Raises DeliveryFailed when every attempt failed.
    """
    attempts = settings.NOTIFY_ATTEMPTS if attempts is None else attempts
    delay = settings.NOTIFY_INITIAL_DELAY if initial_delay is None else initial_delay
    timeout = settings.NOTIFY_TIMEOUT if timeout is None else timeout
    payload = notice.model_dump()
    url = str(evaluation_url)

    for attempt in range(1, attempts + 1):
        try:
            log("notify", f"POST {url} attempt {attempt}/{attempts} task={notice.task} round={notice.round}")
            r = post(url, json=payload, headers=HEADERS, timeout=timeout)
            log("notify", f"response: status={r.status_code}")
            if 200 <= r.status_code < 300:
                return
        except requests.RequestException as e:
            log("notify", f"attempt {attempt} failed: {type(e).__name__}: {e}")
        if attempt < attempts:
            log("notify", f"sleep {delay:g}s before retry")
            sleep(delay)
            delay *= 2
    log("notify", "giving up after retries")
    raise DeliveryFailed(f"could not notify {url} after {attempts} attempts")
