import time
from typing import Callable
from .generator import ContentGenerator, default_generator
from .gh_api import ArtifactPublisher, default_publisher
from .log import log, log_exception
from .models import CompletionNotice, PublishedLocation, TaskRequest
from .notifier import DeliveryFailed, notify_with_backoff
from .settings import settings

class PipelineTimeout(RuntimeError):
    pass

def location_name(task: str, round: int) -> str:
    return f"{task.strip().replace(' ', '-')}-round{round}"

def build_notice(req: TaskRequest, location: PublishedLocation) -> CompletionNotice:
    return CompletionNotice(
        email=req.email,
        task=req.task,
        round=req.round,
        nonce=req.nonce,
        repo_url=location.repo_url,
        commit_sha=location.commit_sha,
        pages_url=location.pages_url,
    )

class Pipeline:
    """generate -> publish -> enable Pages -> settle -> notify, for one request.

    ``run`` is meant to be scheduled after the request was acknowledged: it
    never raises, every failure ends up in the log. Only the final
    notification is retried.
    """

    def __init__(
        self,
        generator: ContentGenerator,
        publisher: ArtifactPublisher,
        notify: Callable[[str, CompletionNotice], None] = notify_with_backoff,
        settle_seconds: float = 30.0,
        deadline_seconds: float = 0.0,
        sleep=time.sleep,
        clock=time.monotonic,
    ):
        self.generator = generator
        self.publisher = publisher
        self.notify = notify
        self.settle_seconds = settle_seconds
        self.deadline_seconds = deadline_seconds
        self.sleep = sleep
        self.clock = clock

    def _check_deadline(self, started: float, stage: str) -> None:
        if self.deadline_seconds and self.clock() - started > self.deadline_seconds:
            raise PipelineTimeout(f"deadline of {self.deadline_seconds:g}s passed before {stage}")

    def process(self, req: TaskRequest) -> CompletionNotice:
        """Run every stage, letting failures propagate. Returns the delivered notice."""
        tag = f"task {req.task} r{req.round}"
        started = self.clock()

        log("pipeline", f"{tag}: generating")
        bundle = self.generator.generate(req.brief, req.attachments, req.checks)

        self._check_deadline(started, "publish")
        name = location_name(req.task, req.round)
        log("pipeline", f"{tag}: publishing {len(bundle)} files to {name}")
        location = self.publisher.publish(name, bundle)

        self._check_deadline(started, "enable pages")
        self.publisher.enable_hosting(location)

        log("pipeline", f"{tag}: waiting {self.settle_seconds:g}s for Pages to deploy")
        self.sleep(self.settle_seconds)

        self._check_deadline(started, "notify")
        notice = build_notice(req, location)
        self.notify(str(req.evaluation_url), notice)
        log("pipeline", f"{tag}: done, {notice.pages_url}")
        return notice

    def run(self, req: TaskRequest) -> None:
        try:
            self.process(req)
        except DeliveryFailed as e:
            log("pipeline", f"task {req.task} r{req.round}: notification not delivered: {e}")
        except Exception as e:
            log("pipeline", f"task {req.task} r{req.round}: failed: {type(e).__name__}: {e}")
            log_exception("pipeline", e)

def default_pipeline() -> Pipeline:
    return Pipeline(
        generator=default_generator(),
        publisher=default_publisher(),
        settle_seconds=settings.PAGES_SETTLE_SECONDS,
        deadline_seconds=settings.PIPELINE_DEADLINE_SECONDS,
    )
