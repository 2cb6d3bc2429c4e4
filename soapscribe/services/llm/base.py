"""Completion provider interface used by the note stage."""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """A chat model that turns one prompt into text.

    ``model`` names the underlying model and is recorded on the note.
    """

    model: str = ""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Return the completion for ``prompt``.

        Args:
            prompt: The user message to send to the model.
            **kwargs: ``system`` (system-role instruction) and ``temperature``
                are honored by every provider.

        Returns:
            The model's text response, or an empty string when the
            completion carries no content.

        Raises:
            NoteGenerationError: When the completion service call fails.
        """
