from __future__ import annotations

import base64
import logging
import re

import aiohttp

from ...domain.errors import EvaluationError
from ...domain.models import ResponseKind
from ...domain.repositories import CriteriaEvaluator
from ..metrics import metrics

SYSTEM_PROMPT = (
    "You check submissions for congress tasks. "
    "Decide whether the submission satisfies the task criteria. "
    "Reply with a single word: TRUE if it does, FALSE if it does not."
)

VERDICT_RE = re.compile(r"^(TRUE|YES|FALSE|NO)\b")
POSITIVE_VERDICTS = frozenset({"TRUE", "YES"})

logger = logging.getLogger(__name__)


def parse_verdict(answer: str | None) -> bool:
    normalized = (answer or "").strip().strip(".!\"'`* ").upper()
    match = VERDICT_RE.match(normalized)
    if match is None:
        raise EvaluationError(f"Unexpected evaluator answer: {(answer or '')[:100]!r}")
    return match.group(1) in POSITIVE_VERDICTS


class LLMCriteriaEvaluator(CriteriaEvaluator):
    """
    Оценка ответа по критериям через OpenAI-совместимый chat completions API.
    Картинки уходят как data URL.
    """

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        session_timeout: int = 60,
    ):
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._session_timeout = session_timeout
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if not self._session or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._session_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def build_messages(self, criteria: str, response: str | bytes, kind: ResponseKind) -> list[dict]:
        if kind == ResponseKind.IMAGE:
            if not isinstance(response, (bytes, bytearray)):
                raise EvaluationError("Image evaluation needs raw image bytes")
            encoded = base64.b64encode(bytes(response)).decode("ascii")
            content: list[dict] | str = [
                {"type": "text", "text": f"Criteria:\n{criteria}\n\nThe submission is the attached image."},
                {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{encoded}"}},
            ]
        else:
            content = f"Criteria:\n{criteria}\n\nSubmission:\n{response}"
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": content},
        ]

    @metrics.wrap_async("evaluator:evaluate", source="evaluator")
    async def evaluate(self, criteria: str, response: str | bytes, kind: ResponseKind) -> bool:
        payload = {
            "model": self._model,
            "messages": self.build_messages(criteria, response, kind),
            "temperature": 0,
            "max_tokens": 5,
        }
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        session = self._get_session()
        try:
            async with session.post(f"{self._api_url}/chat/completions", json=payload, headers=headers) as resp:
                if resp.status >= 400:
                    raise EvaluationError(f"Evaluator error: {resp.status} {(await resp.text())[:200]}")
                data = await resp.json()
        except aiohttp.ClientError as exc:
            raise EvaluationError(f"Evaluator request failed: {exc}") from exc

        try:
            answer = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise EvaluationError("Evaluator returned no answer") from exc
        verdict = parse_verdict(answer)
        logger.debug("Evaluator verdict kind=%s verdict=%s", kind.value, verdict)
        return verdict

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
