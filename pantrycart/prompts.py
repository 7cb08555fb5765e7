"""Fixed instruction texts sent alongside images and video references."""

AISLE_NAMES = "Produce, Dairy, Meat, Pantry, Bakery, Frozen, Other"

PAGE_VISION_PROMPT = f"""You are looking at a preview image (and maybe some page text) from a recipe or cooking video.

1. List every ingredient you can identify in the image or that the recipe clearly implies.
   Use short grocery-style labels such as "tomatoes", "olive oil", "fresh basil".
2. Give each ingredient exactly one supermarket aisle, using only these names: {AISLE_NAMES}.

Respond with a single JSON object and nothing else:
{{
  "ingredients": [
    {{"name": "ingredient name", "aisle": "Produce"}}
  ],
  "steps": ["optional step 1", "optional step 2"]
}}
Leave "steps" empty when you cannot tell them. Every ingredient needs "name" and "aisle".
"""

RECIPE_SCHEMA = """{
  "title": "descriptive name of the dish",
  "servings": "e.g. '4 servings' or '12 cookies'",
  "cookingTime": "total time, e.g. '30 minutes'",
  "prepTime": "preparation time if mentioned separately",
  "temperature": "oven or stove temperature if shown",
  "ingredients": [
    {"name": "specific ingredient name", "quantity": "amount with unit", "notes": "e.g. 'softened'"}
  ],
  "instructions": ["step 1 with timing and technique", "step 2"],
  "notes": "tips or observations",
  "equipment": ["mixing bowl", "whisk"]
}"""

VIDEO_PROMPT = f"""Watch the whole cooking video, start to finish, and write down the recipe it shows.

- Include every ingredient that is shown, added or mentioned, including garnishes and optional ones.
- Record quantities exactly as shown on measuring tools, scales or text overlays ("2 cups", "500g").
  When no amount is visible, estimate from what you see ("small pinch", "handful").
- Count portions from the plates served or from what the cook says.
- List every step in order with its technique, timing and temperature.
- Use only what is seen and heard in the video, not its title, description or captions.
  If an amount is hidden, write "amount not visible".

Return only JSON, no markdown, in this shape:

{RECIPE_SCHEMA}
"""

INGREDIENTS_PROMPT = f"""Identify every ingredient visible in this image or video frame, including garnishes.
Record quantities when a measuring tool, package or text overlay shows them; otherwise estimate
("small pinch", "handful") or write "amount not visible". Use only what is visible.

Return only JSON, no markdown, in this shape:

{RECIPE_SCHEMA}
"""


def page_context(text: str, limit: int = 1500) -> str:
    return f"Optional context from the page:\n{text[:limit]}\n\n"
