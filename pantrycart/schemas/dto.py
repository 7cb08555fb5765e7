from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Aisle(str, Enum):
    PRODUCE = "Produce"
    DAIRY = "Dairy"
    MEAT = "Meat"
    PANTRY = "Pantry"
    BAKERY = "Bakery"
    FROZEN = "Frozen"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value) -> Optional["Aisle"]:
        """Match a free-text label against the enumeration, case-insensitively."""
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for aisle in cls:
            if aisle.value.lower() == key:
                return aisle
        return None


class GroceryByAisle(BaseModel):
    aisle: str
    items: List[str]


class ParsedRecipe(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = "Untitled Recipe"
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    servings: Optional[int] = 4
    grocery_by_aisle: Optional[List[GroceryByAisle]] = Field(default=None, alias="groceryByAisle")

    # extras returned by video analysis
    cooking_time: Optional[str] = Field(default=None, alias="cookingTime")
    prep_time: Optional[str] = Field(default=None, alias="prepTime")
    temperature: Optional[str] = None
    notes: Optional[str] = None
    equipment: Optional[List[str]] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_not_empty(cls, v):
        v = (v or "").strip() if isinstance(v, str) else ""
        return v or "Untitled Recipe"

    @field_validator("servings")
    @classmethod
    def positive_servings(cls, v):
        if v is None:
            return v
        return v if v > 0 else 4

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class AisleIngredient(BaseModel):
    name: str
    aisle: Aisle


class GroceryItem(BaseModel):
    id: str
    name: str
    category: str
    checked: bool = False


class DetectedGroceryItem(GroceryItem):
    category: Aisle
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class KitchenInventoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class RecipeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    title: str = "Untitled Recipe"
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    servings: Optional[int] = None

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class MatchLevel(str, Enum):
    CAN_MAKE = "can_make"
    ALMOST = "almost"
    NEED_MORE = "need_more"


class RecipeMatch(BaseModel):
    recipe: RecipeSummary
    level: MatchLevel
    matched_count: int
    total_ingredients: int
    missing_ingredients: List[str]
    score: float = Field(ge=0.0, le=1.0)


# --- request bodies ---

class ParseTextRequest(BaseModel):
    text: str = Field(min_length=1)


class ScaleRequest(BaseModel):
    ingredients: List[str]
    factor: float = Field(gt=0)


class ScaleResponse(BaseModel):
    ingredients: List[str]


class RecognizeRequest(BaseModel):
    images: List[str] = Field(min_length=1)


class RecognizeResponse(BaseModel):
    items: List[DetectedGroceryItem]


class SaveRecipeRequest(BaseModel):
    title: str = Field(min_length=1)
    source_url: str = ""
    image_url: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    servings: Optional[int] = Field(default=None, gt=0)

    @field_validator("ingredients", "steps")
    @classmethod
    def drop_blank(cls, v):
        return [s.strip() for s in v if s.strip()]


class InventoryAddRequest(BaseModel):
    """Names as a list, typed text (one per line or comma separated), or both."""
    names: List[str] = Field(default_factory=list)
    text: Optional[str] = None

    @field_validator("names")
    @classmethod
    def norm(cls, v):
        return [s.strip() for s in v if s.strip()]

    @model_validator(mode="after")
    def names_or_text(self):
        if not self.names and not (self.text or "").strip():
            raise ValueError("names or text is required")
        return self


class GroceryListRequest(BaseModel):
    ingredients: List[str] = Field(default_factory=list)
    text: Optional[str] = None
    recipe_id: Optional[int] = None

    @field_validator("ingredients")
    @classmethod
    def drop_blank(cls, v):
        return [s.strip() for s in v if s.strip()]

    @model_validator(mode="after")
    def ingredients_or_text(self):
        if not self.ingredients and not (self.text or "").strip():
            raise ValueError("ingredients or text is required")
        return self


class GroceryFromUrlsRequest(BaseModel):
    urls: List[str] = Field(min_length=1)

    @field_validator("urls")
    @classmethod
    def http_only(cls, v):
        urls = [u.strip() for u in v if u.strip()]
        if not urls or not all(u.startswith("http") for u in urls):
            raise ValueError("urls must be http(s) links")
        return urls
