"""SuitePulse — Anthropic Claude Provider."""

import json
from typing import Optional
from anthropic import AsyncAnthropic

from suitepulse.ai.base_provider import AIProvider
from suitepulse.config import settings
from suitepulse.core.logging import get_logger

logger = get_logger("ai.claude")

MAX_TOKENS = 800

SYSTEM_PROMPT = """You are the productivity coach inside a business suite.

You receive one user's metrics snapshot covering tasks, revenue,
gamification and focus time. Interpret it; do not recompute it.

RULES:

1. Quote numbers exactly as given. Never estimate or round them.
2. Sources listed as offline have placeholder values. Say that data is
   unavailable; never describe those placeholders as real zeros.
3. A zero from a live source is a real zero and may be discussed.
4. Do not introduce numbers that are not in the snapshot.

FORMAT:
- Lead with the most important finding
- Short bullet points, under 250 words
- Close with one concrete suggestion for today
"""


def build_prompt(snapshot_json: dict, question: Optional[str] = None) -> str:
    """User turn for a snapshot: offline sources first, then the data."""
    offline = sorted(
        name for name, down in snapshot_json.get("degraded", {}).items() if down
    )
    header = (
        f"Offline sources: {', '.join(offline)}" if offline else "All sources live."
    )
    metrics = json.dumps(snapshot_json.get("metrics", {}), indent=2, sort_keys=True)

    if question:
        task = f'Answer the user\'s question using only these metrics: "{question}"'
    else:
        task = "Write today's briefing from these metrics."
    return f"{task}\n\n{header}\n\nMetrics:\n{metrics}"


class ClaudeProvider(AIProvider):
    """Narrates snapshots with Anthropic's Messages API."""

    def __init__(self, api_key: Optional[str] = None):
        key = api_key or settings.anthropic_api_key
        self.client = AsyncAnthropic(api_key=key) if key else None

    def is_available(self) -> bool:
        return self.client is not None

    async def generate_summary(
        self, snapshot_json: dict, question: Optional[str] = None
    ) -> str:
        if self.client is None:
            raise RuntimeError("ANTHROPIC_API_KEY is not set")

        message = await self.client.messages.create(
            model=settings.ai_model,
            max_tokens=MAX_TOKENS,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_prompt(snapshot_json, question)}],
        )
        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text:
            logger.warning("Claude returned no text blocks")
            return "No summary generated."
        return text
