"""Prompts for meal photo analysis.

Static instructions live in the system prompts; the dynamic part (photo or
food list) goes into the user message.
"""

from typing import Any, Dict, List

# ═══════════════════════════════════════════════════════════
# SYSTEM PROMPTS (static instructions)
# ═══════════════════════════════════════════════════════════

FOOD_IDENTIFICATION_SYSTEM_PROMPT = """You are an expert food identifier.

Given a photo of a meal, identify the individual food items that are present \
in the photo and return them as a list.

Rules:
- One entry per distinct food item (e.g., "fried egg", "toast", "orange juice")
- Use short, common English names
- List the most prominent items first
- Do not invent items that are not visible
- If the photo contains no food, return an empty list
"""

CALORIE_ESTIMATION_SYSTEM_PROMPT = """You are a nutrition expert.

You receive a comma-separated list of food items identified in a meal photo. \
Estimate the calorie count for each food item in the list.

Provide a detailed breakdown of each food item and its estimated calorie \
count, assuming a typical single serving, followed by the estimated total.
"""


# ═══════════════════════════════════════════════════════════
# USER MESSAGE BUILDERS (dynamic)
# ═══════════════════════════════════════════════════════════


def build_identification_messages(image_data_url: str) -> List[Dict[str, Any]]:
    """Build message array for food identification.

    Args:
        image_data_url: Photo as a base64 data URL

    Returns:
        List of message dicts for OpenAI API
    """
    return [
        {"role": "system", "content": FOOD_IDENTIFICATION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Identify the food items in this photo."},
                {"type": "image_url", "image_url": {"url": image_data_url}},
            ],
        },
    ]


def build_estimation_messages(food_items: str) -> List[Dict[str, Any]]:
    """Build message array for calorie estimation.

    Args:
        food_items: Comma-separated food labels

    Returns:
        List of message dicts for OpenAI API
    """
    return [
        {"role": "system", "content": CALORIE_ESTIMATION_SYSTEM_PROMPT},
        {"role": "user", "content": f"Food Items: {food_items}"},
    ]
