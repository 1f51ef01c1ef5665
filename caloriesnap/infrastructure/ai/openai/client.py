"""OpenAI client - implements IFoodIdentifier and ICalorieEstimator ports.

Key Features:
- Structured outputs (native Pydantic support)
- Single attempt per call (SDK retries disabled)
- Bounded per-call timeout
- SDK errors translated to domain RemoteCallError types
"""

import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

from openai import (
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    ContentFilterFinishReasonError,
    LengthFinishReasonError,
    OpenAIError,
)
from pydantic import BaseModel, ValidationError

from caloriesnap.domain.shared.errors import (
    RemoteCallError,
    RemoteTimeoutError,
    SchemaViolationError,
)
from caloriesnap.infrastructure.ai.openai.models import (
    CalorieEstimateResponse,
    FoodIdentificationResponse,
)
from caloriesnap.infrastructure.ai.prompts.meal_analysis import (
    build_estimation_messages,
    build_identification_messages,
)
from caloriesnap.infrastructure.config import DEFAULT_OPENAI_MODEL

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class OpenAIMealClient:
    """
    OpenAI multimodal client implementing both meal analysis ports.

    Follows Dependency Inversion Principle:
    - Domain defines IFoodIdentifier / ICalorieEstimator (ports)
    - Infrastructure provides OpenAIMealClient (adapter)

    Example:
        >>> async with OpenAIMealClient(api_key="sk-...") as client:
        ...     items = await client.identify_food_items(asset.data_url)
        ...     text = await client.estimate_calories(", ".join(items))
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = 0.2,
        timeout: float = 30.0,
    ):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Model name (must support vision and structured outputs)
            temperature: Sampling temperature
            timeout: Per-request timeout in seconds
        """
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model
        self._temperature = temperature
        self._timeout = timeout

    async def __aenter__(self) -> "OpenAIMealClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self._client.close()

    async def identify_food_items(self, image_data_url: str) -> List[str]:
        """
        Identify food items in a photo.

        Implements IFoodIdentifier.identify_food_items() port.

        Args:
            image_data_url: Photo as a base64 data URL

        Returns:
            Food labels in the order returned by the model (may be empty)

        Raises:
            RemoteTimeoutError: On timeout
            SchemaViolationError: On refusal or off-schema output
            RemoteCallError: On any other API failure
        """
        start_time = time.time()

        logger.info(
            "Identifying food items",
            extra={"model": self._model, "payload_chars": len(image_data_url)},
        )

        response = await self._structured_completion(
            messages=build_identification_messages(image_data_url),
            response_model=FoodIdentificationResponse,
        )

        logger.info(
            "Food identification complete",
            extra={
                "item_count": len(response.food_items),
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )

        return list(response.food_items)

    async def estimate_calories(self, food_items: str) -> str:
        """
        Estimate calories for a comma-separated list of food items.

        Implements ICalorieEstimator.estimate_calories() port.

        Args:
            food_items: Comma-separated food labels

        Returns:
            Free-text calorie breakdown

        Raises:
            RemoteTimeoutError: On timeout
            SchemaViolationError: On refusal or off-schema output
            RemoteCallError: On any other API failure
        """
        start_time = time.time()

        logger.info(
            "Estimating calories",
            extra={"model": self._model, "food_items": food_items},
        )

        response = await self._structured_completion(
            messages=build_estimation_messages(food_items),
            response_model=CalorieEstimateResponse,
        )

        logger.info(
            "Calorie estimation complete",
            extra={
                "estimate_length": len(response.estimated_calories),
                "processing_time_ms": int((time.time() - start_time) * 1000),
            },
        )

        return response.estimated_calories

    async def _structured_completion(
        self,
        messages: List[Dict[str, Any]],
        response_model: Type[ResponseT],
    ) -> ResponseT:
        """
        Execute one OpenAI completion with structured output.

        Uses chat.completions.parse() for native Pydantic support.

        Args:
            messages: System + user messages
            response_model: Pydantic model for response schema

        Returns:
            Parsed Pydantic model instance

        Raises:
            RemoteCallError: Any failure, see subclasses
        """
        logger.debug(
            "Calling OpenAI structured completion",
            extra={
                "model": self._model,
                "response_model": response_model.__name__,
                "message_count": len(messages),
            },
        )

        try:
            completion = await self._client.chat.completions.parse(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
                response_format=response_model,
                temperature=self._temperature,
            )
        except APITimeoutError as e:
            raise RemoteTimeoutError(
                f"OpenAI request timed out after {self._timeout:g}s"
            ) from e
        except (LengthFinishReasonError, ContentFilterFinishReasonError) as e:
            raise SchemaViolationError(f"OpenAI response incomplete: {e}") from e
        except ValidationError as e:
            raise SchemaViolationError(
                f"OpenAI response does not match {response_model.__name__}: {e}"
            ) from e
        except APIError as e:
            raise RemoteCallError(f"OpenAI API failed: {e}") from e
        except OpenAIError as e:
            raise RemoteCallError(f"OpenAI client error: {e}") from e

        usage = completion.usage
        if usage:
            logger.info(
                "OpenAI response received",
                extra={
                    "model": self._model,
                    "total_tokens": usage.total_tokens,
                    "prompt_tokens": usage.prompt_tokens,
                    "completion_tokens": usage.completion_tokens,
                },
            )

        if not completion.choices:
            raise SchemaViolationError("OpenAI returned no choices")

        message = completion.choices[0].message
        refusal: Optional[str] = getattr(message, "refusal", None)
        if refusal:
            raise SchemaViolationError(f"OpenAI refused the request: {refusal}")

        parsed = message.parsed
        if parsed is None:
            raise SchemaViolationError("OpenAI returned empty parsed response")

        return parsed
