"""
AI Tool Patterns

The static catalog of AI services recognised in browser history. Each entry
is (tool name, category, URL rule); the table is compiled once at import into
an immutable tuple of ToolPattern records.

Matching is deterministic: a URL is tested against the patterns in catalog
order and the first hit decides tool and category. Overlapping entries are
therefore resolved by position, e.g. ``sora.chatgpt.com`` is reported as
ChatGPT because ChatGPT is declared before Sora.

Rules are case-insensitive regular expressions anchored on the URL host, so
``you.com`` does not fire on ``thankyou.com`` and a host name appearing in a
query string does not count.

Not in the catalog (indistinguishable from the host product by URL alone):
- Notion AI (notion.so pages)
- Canva Magic Studio (canva.com designs)
- Google Search AI Overviews (google.com/search)
- Gemini side panel in Gmail/Docs (mail.google.com, docs.google.com)
- Microsoft 365 Copilot inside Office web apps (office.com, sharepoint.com)
- Grammarly's inline assistant (runs inside other sites)
"""

from __future__ import annotations

import re
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

from core.enums import ToolCategory
from core.models import ToolPattern

GEN = ToolCategory.GENERATIVE
CODE = ToolCategory.CODE
IMG = ToolCategory.IMAGE
AV = ToolCategory.AUDIO_VIDEO
BIZ = ToolCategory.BUSINESS
RES = ToolCategory.RESEARCH

_SCHEME = r"^[a-z][a-z0-9+.-]*://(?:[^/@]*@)?"
_HOST_END = r"(?::\d+)?(?=[/?#]|$)"


def host_rule(*domains: str) -> str:
    """Regex matching any of the domains or their subdomains as URL host."""
    alternatives = "|".join(re.escape(domain) for domain in domains)
    return rf"{_SCHEME}(?:[^/?#]*\.)?(?:{alternatives}){_HOST_END}"


def path_rule(domain: str, *prefixes: str) -> str:
    """Regex matching a host (or subdomain) whose path starts with a prefix."""
    paths = "|".join(re.escape(prefix) for prefix in prefixes)
    return rf"{_SCHEME}(?:[^/?#]*\.)?{re.escape(domain)}(?::\d+)?(?:{paths})(?=[/?#]|$)"


def any_rule(*rules: str) -> str:
    return "|".join(f"(?:{rule})" for rule in rules)


# Order matters: first match wins.
AI_TOOL_DEFINITIONS: Sequence[Tuple[str, ToolCategory, str]] = (
    # Generative AI
    ("ChatGPT", GEN, host_rule("chat.openai.com", "chatgpt.com")),
    ("Claude", GEN, host_rule("claude.ai")),
    ("Gemini", GEN, host_rule("gemini.google.com", "bard.google.com")),
    ("Google AI Studio", GEN, host_rule("aistudio.google.com", "makersuite.google.com")),
    ("Microsoft Copilot", GEN, any_rule(
        host_rule("copilot.microsoft.com", "copilot.cloud.microsoft"),
        path_rule("bing.com", "/chat"),
    )),
    ("Perplexity", GEN, host_rule("perplexity.ai")),
    ("Poe", GEN, host_rule("poe.com")),
    ("Character.AI", GEN, host_rule("character.ai")),
    ("Mistral Le Chat", GEN, host_rule("chat.mistral.ai")),
    ("Meta AI", GEN, host_rule("meta.ai")),
    ("Grok", GEN, any_rule(host_rule("grok.com"), path_rule("x.com", "/i/grok"))),
    ("DeepSeek", GEN, host_rule("deepseek.com")),
    ("Pi", GEN, host_rule("pi.ai")),
    ("HuggingChat", GEN, path_rule("huggingface.co", "/chat")),
    ("You.com", GEN, host_rule("you.com")),
    ("Qwen Chat", GEN, host_rule("chat.qwen.ai", "tongyi.aliyun.com")),
    ("Kimi", GEN, host_rule("kimi.com", "kimi.moonshot.cn")),
    ("OpenAI Platform", GEN, host_rule("platform.openai.com")),
    ("Anthropic Console", GEN, host_rule("console.anthropic.com")),
    ("Cohere", GEN, host_rule("coral.cohere.com", "dashboard.cohere.com")),
    ("Groq", GEN, host_rule("groq.com")),
    # Code AI
    ("GitHub Copilot", CODE, any_rule(
        host_rule("copilot.github.com"),
        path_rule("github.com", "/copilot", "/features/copilot"),
    )),
    ("Cursor", CODE, host_rule("cursor.com", "cursor.sh")),
    ("Replit", CODE, host_rule("replit.com")),
    ("Bolt", CODE, host_rule("bolt.new")),
    ("v0", CODE, host_rule("v0.dev", "v0.app")),
    ("Lovable", CODE, host_rule("lovable.dev")),
    ("Codeium", CODE, host_rule("codeium.com")),
    ("Windsurf", CODE, host_rule("windsurf.com")),
    ("Tabnine", CODE, host_rule("tabnine.com")),
    ("Phind", CODE, host_rule("phind.com")),
    ("Sourcegraph Cody", CODE, path_rule("sourcegraph.com", "/cody")),
    ("Amazon Q Developer", CODE, path_rule("aws.amazon.com", "/q/developer")),
    ("Blackbox AI", CODE, host_rule("blackbox.ai")),
    ("Devin", CODE, host_rule("devin.ai")),
    ("Hugging Face", CODE, host_rule("huggingface.co")),
    # Image AI
    ("Midjourney", IMG, host_rule("midjourney.com")),
    ("DALL-E", IMG, host_rule("labs.openai.com")),
    ("DreamStudio", IMG, host_rule("dreamstudio.ai")),
    ("Stability AI", IMG, host_rule("stability.ai")),
    ("Leonardo.Ai", IMG, host_rule("leonardo.ai")),
    ("Ideogram", IMG, host_rule("ideogram.ai")),
    ("Adobe Firefly", IMG, host_rule("firefly.adobe.com")),
    ("Craiyon", IMG, host_rule("craiyon.com")),
    ("NightCafe", IMG, host_rule("nightcafe.studio")),
    ("Playground AI", IMG, host_rule("playground.com", "playgroundai.com")),
    ("Lexica", IMG, host_rule("lexica.art")),
    ("Krea", IMG, host_rule("krea.ai")),
    ("Civitai", IMG, host_rule("civitai.com")),
    # Audio/Video AI
    ("Sora", AV, host_rule("sora.com", "sora.chatgpt.com")),
    ("Runway", AV, host_rule("runwayml.com")),
    ("Pika", AV, host_rule("pika.art")),
    ("Synthesia", AV, host_rule("synthesia.io")),
    ("HeyGen", AV, host_rule("heygen.com")),
    ("ElevenLabs", AV, host_rule("elevenlabs.io")),
    ("Suno", AV, host_rule("suno.com", "suno.ai")),
    ("Udio", AV, host_rule("udio.com")),
    ("Descript", AV, host_rule("descript.com")),
    ("Murf", AV, host_rule("murf.ai")),
    ("Luma Dream Machine", AV, host_rule("lumalabs.ai")),
    ("Kling", AV, host_rule("klingai.com")),
    ("Otter.ai", AV, host_rule("otter.ai")),
    # Business AI
    ("Jasper", BIZ, host_rule("jasper.ai")),
    ("Copy.ai", BIZ, host_rule("copy.ai")),
    ("Writesonic", BIZ, host_rule("writesonic.com")),
    ("QuillBot", BIZ, host_rule("quillbot.com")),
    ("Rytr", BIZ, host_rule("rytr.me")),
    ("Wordtune", BIZ, host_rule("wordtune.com")),
    ("Tome", BIZ, host_rule("tome.app")),
    ("Gamma", BIZ, host_rule("gamma.app")),
    ("Beautiful.ai", BIZ, host_rule("beautiful.ai")),
    ("Fireflies.ai", BIZ, host_rule("fireflies.ai")),
    # Research AI
    ("NotebookLM", RES, host_rule("notebooklm.google.com", "notebooklm.google")),
    ("Elicit", RES, host_rule("elicit.com", "elicit.org")),
    ("Consensus", RES, host_rule("consensus.app")),
    ("Scite", RES, host_rule("scite.ai")),
    ("SciSpace", RES, host_rule("scispace.com", "typeset.io")),
    ("Scholarcy", RES, host_rule("scholarcy.com")),
    ("Explainpaper", RES, host_rule("explainpaper.com")),
    ("Research Rabbit", RES, host_rule("researchrabbit.ai", "researchrabbitapp.com")),
    ("Connected Papers", RES, host_rule("connectedpapers.com")),
    ("Humata", RES, host_rule("humata.ai")),
    ("ChatPDF", RES, host_rule("chatpdf.com")),
)


def _compile_catalog(
    definitions: Sequence[Tuple[str, ToolCategory, str]],
) -> Tuple[ToolPattern, ...]:
    seen = set()
    patterns = []
    for name, category, rule in definitions:
        if name in seen:
            raise ValueError(f"Duplicate AI tool pattern: {name}")
        seen.add(name)
        patterns.append(ToolPattern(name=name, category=str(category), rule=re.compile(rule, re.IGNORECASE)))
    return tuple(patterns)


AI_TOOL_PATTERNS: Tuple[ToolPattern, ...] = _compile_catalog(AI_TOOL_DEFINITIONS)


def list_patterns() -> Tuple[ToolPattern, ...]:
    """All patterns in catalog (match priority) order."""
    return AI_TOOL_PATTERNS


def classify_url(url: str, patterns: Optional[Sequence[ToolPattern]] = None) -> Optional[ToolPattern]:
    """
    Classify a URL against the catalog.

    Args:
        url: Visited URL
        patterns: Alternate ordered catalog (defaults to AI_TOOL_PATTERNS)

    Returns:
        The first matching ToolPattern, or None when no pattern matches
    """
    if not url:
        return None
    text = url.strip()
    for pattern in AI_TOOL_PATTERNS if patterns is None else patterns:
        if pattern.matches(text):
            return pattern
    return None


def patterns_by_category() -> Dict[str, List[ToolPattern]]:
    """Catalog grouped by category, categories in order of first appearance."""
    grouped: Dict[str, List[ToolPattern]] = OrderedDict()
    for pattern in list_patterns():
        grouped.setdefault(pattern.category, []).append(pattern)
    return grouped
