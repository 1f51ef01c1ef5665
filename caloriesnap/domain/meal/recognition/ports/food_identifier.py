"""Port (interface) for food identification providers.

This port defines the contract that external multimodal models
(e.g., OpenAI GPT-4o) must implement to be used by the domain layer.
"""

from typing import List, Protocol


class IFoodIdentifier(Protocol):
    """
    Interface for food identification providers.

    This port follows the Dependency Inversion Principle:
    - Domain layer defines the interface (port)
    - Infrastructure layer implements it (adapter)

    Implementations can be:
    - OpenAI multimodal model (production)
    - Stub provider (for development and testing)
    """

    async def identify_food_items(self, image_data_url: str) -> List[str]:
        """
        Identify the individual food items visible in a photo.

        Args:
            image_data_url: Photo as a ``data:image/...;base64,`` URL

        Returns:
            Ordered food labels; empty when nothing was recognised

        Raises:
            RemoteCallError: Transport failure, timeout or schema violation
        """
        ...
