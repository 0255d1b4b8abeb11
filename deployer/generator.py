from typing import Callable, Dict, List, Optional
from . import llm, templates
from .data_uri import DataUriError, decode_data_uri
from .log import log
from .models import ArtifactBundle, Attachment
from .settings import settings

ENTRY_POINT = "index.html"

class GenerationError(RuntimeError):
    pass

def _attachment_map(attachments: List[Attachment]) -> Dict[str, bytes]:
    out = {}
    for a in attachments:
        try:
            _, data = decode_data_uri(a.url)
        except DataUriError as e:
            raise GenerationError(f"attachment {a.name!r}: {e}") from e
        if a.name in out:
            log("generate", f"duplicate attachment {a.name!r}: later one replaces the earlier")
        out[a.name] = data
    return out

class ContentGenerator:
    """Turns a brief into the file bundle that gets published.

    The LLM only writes ``index.html``; README and LICENSE are rendered from
    templates and attachments are shipped as-is next to the page.
    """

    def __init__(self, synthesize: Optional[Callable[[str, List[str], List[str]], str]] = None,
                 license_holder: str = ""):
        self.synthesize = synthesize or llm.synthesize_page
        self.license_holder = license_holder

    def generate(self, brief: str, attachments: List[Attachment], checks: List[str]) -> ArtifactBundle:
        files = _attachment_map(attachments)
        names = list(files)
        try:
            html = self.synthesize(brief, checks, names)
        except Exception as e:
            raise GenerationError(f"generation failed: {e}") from e
        if not html or not html.strip():
            raise GenerationError("generator returned empty content")

        bundle: ArtifactBundle = {
            ENTRY_POINT: html,
            "README.md": templates.readme(brief, checks, names),
            "LICENSE": templates.mit_license(self.license_holder),
        }
        for name, data in files.items():
            if name in bundle:
                log("generate", f"skipping attachment {name!r}: clashes with generated file")
                continue
            bundle[name] = data
        return bundle

def default_generator() -> ContentGenerator:
    return ContentGenerator(license_holder=settings.LICENSE_HOLDER)
