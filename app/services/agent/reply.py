"""Reply generation over the OpenAI chat completions API."""
import logging
from typing import Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from app.core.config import settings
from app.services.call_session.models import Turn
from app.services.errors import GenerationError

logger = logging.getLogger(__name__)


class ReplyGenerator:
    """Turns an ordered conversation into the assistant's next utterance.

    A single attempt is made per call; the turn controller decides what to
    say when it fails.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )
        self.model = model or settings.chat_model
        self.temperature = settings.chat_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.chat_max_tokens

    async def generate(self, turns: Sequence[Turn]) -> str:
        """
        Generate the assistant reply for a conversation.

        Args:
            turns: Full history, persona instruction first

        Returns:
            Reply text

        Raises:
            GenerationError: On backend error, timeout or an empty reply
        """
        messages = [turn.as_message() for turn in turns]
        logger.debug(f"[REPLY] Requesting reply - Model: {self.model}, Turns: {len(messages)}")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise GenerationError(f"Chat completion failed: {type(e).__name__}: {str(e)}") from e

        if not response.choices:
            raise GenerationError("Chat completion returned no choices")

        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise GenerationError("Chat completion returned an empty reply")

        logger.info(f"[REPLY] Reply generated (length: {len(content)})")
        return content
