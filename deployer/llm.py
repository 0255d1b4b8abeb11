from typing import List
import re
from openai import OpenAI
from .settings import settings

# ---------- client ----------
def _client() -> OpenAI:
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY not set")
    return OpenAI(api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL or None)

# ---------- prompt ----------
def build_prompt(brief: str, checks: List[str], attachment_names: List[str]) -> str:
    numbered = "\n".join(f"{i}. {c}" for i, c in enumerate(checks, 1)) or "(none)"
    attach = ""
    if attachment_names:
        attach = (
            "Attachments provided (served next to index.html, load them with fetch('<name>')):\n"
            + "\n".join(f"- {n}" for n in attachment_names)
            + "\n\n"
        )
    return f"""Create a complete, production-ready single-page web application based on this brief:

{brief}

Requirements:
{numbered}

{attach}Generate a complete HTML file with inline CSS and JavaScript. The app should:
- Be a single index.html file
- Work standalone without external dependencies except CDN libraries
- Include proper error handling
- Be mobile-responsive
- Have clean, professional styling

Return ONLY the HTML code, nothing else."""

# ---------- post-processing ----------
_WRAPPED_RE = re.compile(r"\A\s*```[\w-]*[ \t]*\n([\s\S]*?)\n?```\s*\Z")
_OPEN_FENCE_RE = re.compile(r"\A\s*```[\w-]*[ \t]*\n")
_CLOSE_FENCE_RE = re.compile(r"\n?```\s*\Z")

def strip_fences(text: str) -> str:
    """Unwrap a reply that is one fenced block; fences inside the page are kept."""
    m = _WRAPPED_RE.match(text)
    if m:
        return m.group(1).strip()
    text = _OPEN_FENCE_RE.sub("", text)
    return _CLOSE_FENCE_RE.sub("", text).strip()

# ---------- synthesis ----------
def synthesize_page(brief: str, checks: List[str], attachment_names: List[str]) -> str:
    client = _client()
    resp = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=[
            {"role": "system", "content": "You generate single-file static web apps. Reply with HTML only."},
            {"role": "user", "content": build_prompt(brief, checks, attachment_names)},
        ],
        temperature=0.2,
    )
    return strip_fences(resp.choices[0].message.content or "")
