import datetime
import traceback

from .settings import settings


def log(tag: str, line: str) -> None:
    """Print a tagged line and append it to the service log file."""
    ts = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    msg = f"[{tag}] {ts} {line}"
    print(msg, flush=True)
    try:
        with open(settings.LOG_PATH, "a", encoding="utf-8") as f:
            f.write(msg + "\n")
    except OSError:
        # best-effort; stdout already has the line
        pass


def log_exception(tag: str, exc: BaseException) -> None:
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    log(tag, "exception: " + trace.strip())
