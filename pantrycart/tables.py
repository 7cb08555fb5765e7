"""Read-only lookup tables; components take them as constructor arguments."""
from types import MappingProxyType

# Order used when showing a grocery list.
GROCERY_DISPLAY_ORDER = ("Produce", "Dairy", "Pantry", "Meat", "Bakery", "Frozen", "Other")

UNIT_WORDS = (
    "cup", "cups", "tbsp", "tsp", "oz", "lb", "g", "ml",
    "clove", "cloves", "can", "cans", "pinch",
    "slice", "slices", "piece", "pieces", "stalk", "stalks",
)

# normalized alias -> canonical name
INGREDIENT_SYNONYMS = MappingProxyType({
    "green onion": "scallion",
    "green onions": "scallion",
    "scallion": "scallion",
    "scallions": "scallion",
    "spring onion": "scallion",
    "spring onions": "scallion",
    "cilantro": "coriander",
    "coriander leaves": "coriander",
    "coriander": "coriander",
    "bell pepper": "pepper",
    "bell peppers": "pepper",
    "chili pepper": "pepper",
    "chilli pepper": "pepper",
    "black pepper": "pepper",
    "ground pepper": "pepper",
    "pepper": "pepper",
    "fresh basil": "basil",
    "basil": "basil",
    "tomato paste": "tomato",
    "tomato sauce": "tomato",
    "tomatoes": "tomato",
    "tomato": "tomato",
    "olive oil": "oil",
    "extra virgin olive oil": "oil",
    "vegetable oil": "oil",
    "cooking oil": "oil",
    "oil": "oil",
    "all-purpose flour": "flour",
    "all purpose flour": "flour",
    "plain flour": "flour",
    "flour": "flour",
    "minced garlic": "garlic",
    "garlic clove": "garlic",
    "garlic cloves": "garlic",
    "garlic": "garlic",
    "yellow onion": "onion",
    "red onion": "onion",
    "white onion": "onion",
    "onions": "onion",
    "onion": "onion",
    "soy sauce": "soy",
    "soy": "soy",
    "eggs": "egg",
    "egg": "egg",
    "large eggs": "egg",
    "butter": "butter",
    "unsalted butter": "butter",
    "salted butter": "butter",
    "milk": "milk",
    "whole milk": "milk",
    "cheese": "cheese",
    "salt": "salt",
    "table salt": "salt",
    "kosher salt": "salt",
    "sugar": "sugar",
    "brown sugar": "sugar",
    "white sugar": "sugar",
    "granulated sugar": "sugar",
})

# First aisle whose keyword occurs in the lowercased name wins.
AISLE_KEYWORDS = MappingProxyType({
    "Produce": (
        "onion", "garlic", "tomato", "lettuce", "carrot", "celery", "potato",
        "lemon", "lime", "apple", "banana", "avocado", "pepper", "broccoli",
        "spinach", "kale", "herb", "basil", "parsley", "cilantro", "ginger",
        "cucumber", "zucchini", "mushroom", "corn", "pea", "bean", "fruit",
        "vegetable", "scallion", "shallot",
    ),
    "Dairy": ("milk", "cream", "butter", "cheese", "yogurt", "egg"),
    "Meat": (
        "chicken", "beef", "pork", "bacon", "sausage", "turkey", "lamb",
        "fish", "salmon", "shrimp", "meat",
    ),
    "Pantry": (
        "oil", "vinegar", "salt", "sugar", "flour", "rice", "pasta", "noodle",
        "sauce", "soy", "broth", "stock", "canned", "beans", "lentil", "spice",
        "paprika", "cumin", "oregano", "nut", "honey", "maple", "mustard",
        "ketchup", "breadcrumb", "baking", "vanilla", "chocolate", "coconut",
        "almond", "peanut",
    ),
    "Bakery": ("bread", "tortilla", "wrap", "pita"),
    "Frozen": ("frozen", "ice"),
})

VIDEO_SOCIAL_DOMAINS = (
    "youtube.com",
    "youtu.be",
    "tiktok.com",
    "instagram.com",
    "facebook.com",
    "fb.watch",
    "fb.com",
)

# Instagram, TikTok and Facebook serve a stripped page without og tags to
# non-browser agents.
BROWSER_HEADERS = MappingProxyType({
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
})
