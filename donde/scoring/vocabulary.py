"""
Static keyword and intent lookup tables.

These are data, not logic: scoring code only ever reads them. Bump
``VOCABULARY_VERSION`` whenever an entry is added, removed or re-targeted so
logged outcomes can be tied back to the table that produced them.
"""
from __future__ import annotations

from dataclasses import dataclass

VOCABULARY_VERSION = "2025.3"

CUISINES: tuple[str, ...] = (
    "Mexican", "American", "Italian", "Japanese", "Thai", "Chinese", "Korean",
    "French", "Seafood", "Steak", "Mediterranean", "Vietnamese", "Indian",
    "Ethiopian", "Peruvian", "Brazilian", "Brunch", "Vegan", "Cocktail Bar",
    "Coffee/Cafe", "Polish", "Puerto Rican", "Southern/Soul Food",
    "Middle Eastern", "Greek", "Fusion", "BBQ", "Brewery/Beer Bar",
)

# Order matters: only the first cuisine whose keywords appear is used.
CUISINE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Mexican": ("mexican", "taco", "burrito", "carnitas", "enchilada", "mole"),
    "Italian": ("italian", "pasta", "pizza", "risotto"),
    "Japanese": ("japanese", "sushi", "ramen", "izakaya", "sake"),
    "Thai": ("thai", "pad thai", "curry", "basil"),
    "Chinese": ("chinese", "dim sum", "dumpling", "noodle"),
    "Korean": ("korean", "bibimbap", "bbq", "kimchi"),
    "Indian": ("indian", "curry", "tandoori", "naan", "masala"),
    "French": ("french", "bistro", "crepe"),
    "Seafood": ("seafood", "fish", "lobster", "oyster", "crab"),
    "Steak": ("steak", "steakhouse", "filet"),
    "Mediterranean": ("mediterranean", "mezze", "tabbouleh", "lamb"),
    "Vietnamese": ("vietnamese", "pho", "banh mi"),
    "Brunch": ("brunch", "pancake", "waffle", "mimosa"),
    "American": ("burger", "american", "wings"),
    "Brewery/Beer Bar": (
        "beer", "craft beer", "brewery", "brewpub", "ale", "ipa", "lager",
        "stout", "tap room", "taproom",
    ),
    "Ethiopian": ("ethiopian", "injera", "tibs", "kitfo", "doro wat", "berbere"),
    "Peruvian": ("peruvian", "ceviche", "lomo saltado", "anticucho", "causa"),
    "Brazilian": ("brazilian", "churrasco", "feijoada", "picanha", "rodizio", "caipirinha"),
    "Vegan": ("vegan", "plant-based", "plant based", "meatless"),
    "Cocktail Bar": ("cocktail bar", "speakeasy", "mixology", "cocktail lounge"),
    "Coffee/Cafe": ("coffee shop", "cafe", "espresso", "latte", "cappuccino"),
    "Polish": ("polish", "pierogi", "kielbasa", "bigos", "golabki"),
    "Puerto Rican": (
        "puerto rican", "mofongo", "pernil", "tostones", "alcapurria",
        "arroz con gandules",
    ),
    "Southern/Soul Food": (
        "soul food", "southern", "fried chicken", "collard greens", "cornbread",
        "gumbo", "jambalaya", "catfish",
    ),
    "Middle Eastern": (
        "middle eastern", "shawarma", "kebab", "falafel", "hummus",
        "baba ganoush", "pita",
    ),
    "Greek": ("greek", "gyro", "souvlaki", "moussaka", "spanakopita", "tzatziki"),
    "Fusion": ("fusion", "eclectic", "cross-cultural"),
    "BBQ": ("bbq", "barbecue", "brisket", "ribs", "pulled pork", "smoked meat", "pitmaster"),
}

TAG_KEYWORDS: dict[str, tuple[str, ...]] = {
    "byob": ("byob", "bring your own"),
    "rooftop": ("rooftop", "skyline"),
    "outdoor patio": ("outdoor", "patio", "al fresco"),
    "hidden gem": ("hidden gem", "hidden", "secret"),
    "late night": ("late night", "late", "after midnight"),
    "craft cocktails": ("cocktail", "mixology", "craft drinks"),
    "live music": ("live music", "jazz", "band"),
    "farm-to-table": ("farm to table", "organic", "local ingredients"),
    "scenic view": ("view", "scenic", "panoramic", "waterfront", "lakefront", "river view"),
    "romantic": ("romantic", "intimate", "candlelit", "cozy date"),
    "trendy": ("trendy", "hip", "instagram", "modern", "stylish"),
    "quiet": ("quiet", "peaceful", "calm", "serene"),
    "great value": ("cheap", "affordable", "deal", "value", "budget"),
    "brunch spot": ("brunch", "breakfast", "morning"),
    "waterfront": ("waterfront", "lakefront", "riverwalk", "lake view"),
    "vegan friendly": ("vegan", "plant-based", "plant based"),
    "gluten free": ("gluten free", "celiac", "gluten-free"),
    "lively atmosphere": (
        "bustling", "vibrant", "energetic", "buzzing", "lively", "happening",
        "high energy", "animated", "festive",
    ),
    "craft beer": (
        "craft beer", "brewery", "beer garden", "tap room", "taproom",
        "ale house", "beer selection", "draft beer", "beer list",
    ),
}

FEATURE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "outdoor_seating": (
        "outdoor", "patio", "outside", "al fresco", "terrace", "view",
        "lakefront", "waterfront",
    ),
    "live_music": ("live music", "jazz", "band", "live band"),
    "pet_friendly": ("pet", "dog", "pet-friendly", "dog-friendly"),
}

DIETARY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "vegetarian": ("Vegetarian", "Veg"),
    "vegan": ("Vegan", "Plant-Based"),
    "gluten-free": ("Gluten-Free", "Gluten Free"),
    "gluten free": ("Gluten-Free", "Gluten Free"),
    "halal": ("Halal",),
    "kosher": ("Kosher",),
    "dairy-free": ("Dairy-Free", "Dairy Free"),
    "nut-free": ("Nut-Free", "Nut Free"),
    "keto": ("Keto", "Low-Carb"),
    "paleo": ("Paleo",),
}

GOOD_FOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "date": ("Dates", "Date Night", "Romantic"),
    "group": ("Groups", "Group Dining", "Large Parties"),
    "family": ("Families", "Family", "Kids"),
    "solo": ("Solo", "Solo Dining"),
    "business": ("Business", "Business Lunch", "Meetings"),
}

# Free-text mood word -> flavor descriptors used by deep profiles
FLAVOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "smoky": ("smoky", "charred", "grilled", "wood-fired"),
    "spicy": ("bold-spiced", "chili-forward", "fiery"),
    "fresh": ("bright-acidic", "herbaceous", "citrus-forward", "light"),
    "rich": ("umami-forward", "rich-buttery", "creamy", "decadent"),
    "sweet": ("sweet-savory", "caramelized", "honey-glazed"),
    "tangy": ("fermented", "pickled", "vinegar-bright", "bright-acidic"),
    "earthy": ("earthy", "mushroom", "truffle", "root-vegetable"),
    "savory": ("umami-forward", "savory", "meaty"),
}

TAGS: tuple[str, ...] = tuple(TAG_KEYWORDS)
FEATURES: tuple[str, ...] = tuple(FEATURE_KEYWORDS)


@dataclass(frozen=True)
class IntentSignal:
    cuisines: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    features: tuple[str, ...] = ()


def _signal(cuisines=(), tags=(), features=()) -> IntentSignal:
    return IntentSignal(tuple(cuisines), tuple(tags), tuple(features))


_PHRASE_SIGNALS: dict[str, IntentSignal] = {
    # Cravings
    "spicy": _signal(cuisines=("Thai", "Indian", "Korean", "Mexican")),
    "spice": _signal(cuisines=("Thai", "Indian", "Korean", "Mexican")),
    "noodles": _signal(cuisines=("Japanese", "Vietnamese", "Thai", "Chinese")),
    "raw": _signal(cuisines=("Japanese",), tags=("farm-to-table",)),
    "grilled": _signal(cuisines=("Steak", "American")),
    "bbq": _signal(cuisines=("BBQ", "Korean")),
    "tapas": _signal(cuisines=("Mediterranean",), tags=("trendy",)),
    "dim sum": _signal(cuisines=("Chinese",)),
    "omakase": _signal(cuisines=("Japanese",)),
    "comfort food": _signal(cuisines=("American",), tags=("great value",)),
    "comfort": _signal(cuisines=("American",), tags=("great value",)),
    "sandwich": _signal(cuisines=("American",), tags=("great value",)),
    "salad": _signal(tags=("farm-to-table", "vegan friendly")),
    "soup": _signal(cuisines=("Vietnamese", "Japanese")),
    "dessert": _signal(tags=("trendy",)),
    "pastry": _signal(tags=("trendy",)),
    "coffee": _signal(tags=("brunch spot",)),
    "cafe": _signal(tags=("brunch spot", "quiet")),
    "bakery": _signal(tags=("brunch spot",)),
    "poke": _signal(cuisines=("Japanese",), tags=("farm-to-table",)),
    "fusion": _signal(tags=("trendy",)),
    "ethiopian": _signal(cuisines=("Ethiopian",)),
    "peruvian": _signal(cuisines=("Peruvian",)),
    "brazilian": _signal(cuisines=("Brazilian",)),
    "turkish": _signal(cuisines=("Middle Eastern",)),
    "lebanese": _signal(cuisines=("Middle Eastern",)),
    "middle eastern": _signal(cuisines=("Middle Eastern",)),
    "spanish": _signal(cuisines=("Mediterranean",), tags=("trendy",)),
    "soul food": _signal(cuisines=("Southern/Soul Food",), tags=("hidden gem",)),
    "cajun": _signal(cuisines=("Southern/Soul Food",)),
    "creole": _signal(cuisines=("Southern/Soul Food",)),
    # Flavor and preparation
    "smoky": _signal(cuisines=("Korean", "American", "Steak")),
    "savory": _signal(cuisines=("American", "Italian")),
    "crispy": _signal(cuisines=("Korean", "American")),
    "fried": _signal(cuisines=("Korean", "American")),
    "smoked": _signal(cuisines=("American", "Steak")),
    "braised": _signal(cuisines=("French", "Italian")),
    "wood fired": _signal(cuisines=("Italian",)),
    "charcoal": _signal(cuisines=("Steak", "Korean")),
    "slow cooked": _signal(cuisines=("American", "Italian")),
    "fresh": _signal(tags=("farm-to-table",)),
    # Ambiance
    "bustling": _signal(tags=("lively atmosphere", "trendy", "live music")),
    "vibrant": _signal(tags=("lively atmosphere", "trendy", "live music")),
    "energetic": _signal(tags=("lively atmosphere", "trendy", "live music")),
    "buzzing": _signal(tags=("lively atmosphere", "trendy")),
    "happening": _signal(tags=("trendy", "live music")),
    "high energy": _signal(tags=("lively atmosphere", "trendy", "live music")),
    "animated": _signal(tags=("lively atmosphere", "trendy")),
    "festive": _signal(tags=("lively atmosphere", "trendy", "craft cocktails")),
    "noisy": _signal(tags=("live music", "trendy")),
    "hopping": _signal(tags=("lively atmosphere", "trendy")),
    "loud": _signal(tags=("live music", "trendy")),
    "lively": _signal(tags=("live music", "trendy")),
    "fun": _signal(tags=("trendy", "live music")),
    "mellow": _signal(tags=("quiet", "hidden gem")),
    "relaxed": _signal(tags=("quiet", "hidden gem")),
    "laid back": _signal(tags=("quiet", "hidden gem")),
    "low key": _signal(tags=("quiet", "hidden gem")),
    "tranquil": _signal(tags=("quiet", "romantic")),
    "intimate": _signal(tags=("romantic", "quiet")),
    "warm": _signal(tags=("romantic", "hidden gem")),
    "inviting": _signal(tags=("hidden gem",)),
    "welcoming": _signal(tags=("hidden gem", "great value")),
    "cozy": _signal(tags=("quiet", "hidden gem")),
    "chill": _signal(tags=("quiet", "hidden gem")),
    # Dining level
    "fine dining": _signal(tags=("romantic", "trendy")),
    "white tablecloth": _signal(tags=("romantic",)),
    "tasting menu": _signal(tags=("romantic", "trendy")),
    "prix fixe": _signal(tags=("romantic", "trendy")),
    "casual dining": _signal(tags=("great value",)),
    "neighborhood spot": _signal(tags=("hidden gem", "great value")),
    "hole in the wall": _signal(tags=("hidden gem", "great value")),
    "dive": _signal(tags=("hidden gem", "great value")),
    "fancy": _signal(tags=("trendy", "romantic")),
    "upscale": _signal(tags=("trendy", "romantic")),
    "elegant": _signal(tags=("romantic",)),
    # Occasion and company
    "anniversary": _signal(tags=("romantic", "scenic view")),
    "celebrate": _signal(tags=("romantic", "trendy")),
    "birthday": _signal(tags=("trendy", "craft cocktails")),
    "engagement": _signal(tags=("romantic", "scenic view")),
    "proposal": _signal(tags=("romantic", "scenic view")),
    "graduation": _signal(tags=("trendy", "craft cocktails")),
    "reunion": _signal(tags=("trendy",)),
    "first date": _signal(tags=("romantic", "quiet")),
    "double date": _signal(tags=("romantic", "trendy")),
    "girls night": _signal(tags=("trendy", "craft cocktails")),
    "guys night": _signal(tags=("craft cocktails", "live music")),
    "work dinner": _signal(tags=("quiet",)),
    "team dinner": _signal(tags=("trendy",)),
    "client dinner": _signal(tags=("quiet", "romantic")),
    "romantic": _signal(tags=("romantic", "scenic view")),
    "quiet dinner": _signal(tags=("quiet", "romantic")),
    "business": _signal(tags=("quiet",)),
    "meeting": _signal(tags=("quiet",)),
    "solo": _signal(tags=("quiet", "hidden gem")),
    "kids": _signal(),
    "family": _signal(),
    "group": _signal(),
    "large party": _signal(),
    # Drinks
    "drinks": _signal(tags=("craft cocktails", "byob")),
    "cocktails": _signal(tags=("craft cocktails",)),
    "wine": _signal(cuisines=("Italian", "French"), tags=("romantic",)),
    "beer": _signal(cuisines=("Brewery/Beer Bar",), tags=("craft beer",)),
    "craft beer": _signal(cuisines=("Brewery/Beer Bar",), tags=("craft beer",)),
    "brewery": _signal(cuisines=("Brewery/Beer Bar",)),
    "brewpub": _signal(cuisines=("Brewery/Beer Bar",), tags=("lively atmosphere",)),
    "tap room": _signal(cuisines=("Brewery/Beer Bar",)),
    "ipa": _signal(cuisines=("Brewery/Beer Bar",), tags=("craft beer",)),
    "ale": _signal(cuisines=("Brewery/Beer Bar",), tags=("craft beer",)),
    "happy hour": _signal(tags=("craft cocktails", "great value")),
    "after work": _signal(tags=("craft cocktails", "great value")),
    # Time and value
    "lunch": _signal(tags=("great value",)),
    "dinner": _signal(),
    "supper": _signal(),
    "late night food": _signal(tags=("late night",)),
    "midnight": _signal(tags=("late night",)),
    "early bird": _signal(tags=("great value",)),
    "quick": _signal(tags=("great value",)),
    "fast": _signal(tags=("great value",)),
    "cheap": _signal(tags=("great value", "hidden gem")),
    "affordable": _signal(tags=("great value", "hidden gem")),
    "healthy": _signal(cuisines=("Mediterranean",), tags=("farm-to-table", "vegan friendly")),
    # Discovery
    "unique": _signal(tags=("hidden gem",)),
    "authentic": _signal(tags=("hidden gem",)),
    "local": _signal(tags=("hidden gem",)),
    "touristy": _signal(tags=("trendy", "scenic view")),
    "instagrammable": _signal(tags=("trendy", "rooftop", "scenic view")),
    "photogenic": _signal(tags=("trendy", "scenic view")),
    # Dietary
    "vegetarian": _signal(tags=("vegan friendly",)),
    "vegan": _signal(tags=("vegan friendly",)),
    "gluten": _signal(tags=("gluten free",)),
    "celiac": _signal(tags=("gluten free",)),
    "halal": _signal(),
    "kosher": _signal(),
    "allergy": _signal(),
    # Seating and setting
    "waterfront": _signal(tags=("waterfront", "scenic view"), features=("outdoor_seating",)),
    "lakefront": _signal(tags=("waterfront", "scenic view"), features=("outdoor_seating",)),
    "rooftop": _signal(tags=("rooftop", "scenic view")),
    "skyline": _signal(tags=("rooftop", "scenic view")),
    "garden": _signal(features=("outdoor_seating",)),
    "terrace": _signal(features=("outdoor_seating",)),
    "outdoor dining": _signal(features=("outdoor_seating",)),
    "patio": _signal(tags=("outdoor patio",), features=("outdoor_seating",)),
    "candlelit": _signal(tags=("romantic",)),
    "private dining": _signal(tags=("romantic", "quiet")),
    "semi private": _signal(tags=("quiet",)),
    "bar seating": _signal(tags=("craft cocktails",)),
}

# Dish names across cuisines; each phrase maps straight to cuisines.
_DISH_CUISINES: dict[str, tuple[str, ...]] = {
    "chilaquiles": ("Mexican",), "birria": ("Mexican",), "al pastor": ("Mexican",),
    "pozole": ("Mexican",), "elote": ("Mexican",), "tamale": ("Mexican",),
    "churro": ("Mexican",), "sopapilla": ("Mexican",), "carnitas": ("Mexican",),
    "enchilada": ("Mexican",), "quesadilla": ("Mexican",), "mole": ("Mexican",),
    "tonkatsu": ("Japanese",), "yakitori": ("Japanese",), "udon": ("Japanese",),
    "tempura": ("Japanese",), "katsu": ("Japanese",), "sashimi": ("Japanese",),
    "gyoza": ("Japanese",), "matcha": ("Japanese", "Coffee/Cafe"),
    "bao": ("Chinese",), "hotpot": ("Chinese",), "hot pot": ("Chinese",),
    "peking duck": ("Chinese",), "szechuan": ("Chinese",), "sichuan": ("Chinese",),
    "wonton": ("Chinese",), "dan dan": ("Chinese",), "kung pao": ("Chinese",),
    "mapo tofu": ("Chinese",), "char siu": ("Chinese",),
    "gnocchi": ("Italian",), "tiramisu": ("Italian",), "osso buco": ("Italian",),
    "bolognese": ("Italian",), "carbonara": ("Italian",), "focaccia": ("Italian",),
    "bruschetta": ("Italian",), "arancini": ("Italian",), "prosciutto": ("Italian",),
    "deep dish": ("Italian", "American"), "margherita": ("Italian",),
    "tikka masala": ("Indian",), "biryani": ("Indian",), "vindaloo": ("Indian",),
    "samosa": ("Indian",), "paneer": ("Indian",), "dal": ("Indian",),
    "naan": ("Indian",), "tikka": ("Indian",), "korma": ("Indian",),
    "chana": ("Indian",), "dosa": ("Indian",),
    "green curry": ("Thai",), "tom yum": ("Thai",), "som tum": ("Thai",),
    "papaya salad": ("Thai",), "satay": ("Thai",), "pad see ew": ("Thai",),
    "larb": ("Thai",), "mango sticky rice": ("Thai",),
    "bulgogi": ("Korean",), "japchae": ("Korean",), "tteokbokki": ("Korean",),
    "galbi": ("Korean",), "banchan": ("Korean",), "kimchi jjigae": ("Korean",),
    "kbbq": ("Korean",), "korean bbq": ("Korean",), "soju": ("Korean",),
    "bun bo hue": ("Vietnamese",), "spring rolls": ("Vietnamese",),
    "com tam": ("Vietnamese",), "vermicelli": ("Vietnamese",),
    "tartare": ("French",), "coq au vin": ("French",),
    "bouillabaisse": ("French", "Seafood"), "steak frites": ("French", "Steak"),
    "souffle": ("French",), "croissant": ("French", "Coffee/Cafe"),
    "escargot": ("French",), "ratatouille": ("French",),
    "burnt ends": ("BBQ",), "smoked brisket": ("BBQ",),
    "mac and cheese": ("Southern/Soul Food", "American"),
    "po boy": ("Southern/Soul Food",), "hush puppies": ("Southern/Soul Food",),
    "crawfish": ("Southern/Soul Food", "Seafood"), "grits": ("Southern/Soul Food", "Brunch"),
    "collard greens": ("Southern/Soul Food",),
    "injera": ("Ethiopian",), "doro wat": ("Ethiopian",), "kitfo": ("Ethiopian",),
    "tibs": ("Ethiopian",),
    "ceviche": ("Peruvian", "Seafood"), "lomo saltado": ("Peruvian",),
    "anticucho": ("Peruvian",), "causa": ("Peruvian",),
    "churrasco": ("Brazilian", "Steak"), "rodizio": ("Brazilian",),
    "picanha": ("Brazilian", "Steak"), "feijoada": ("Brazilian",),
    "caipirinha": ("Brazilian",),
    "pierogi": ("Polish",), "kielbasa": ("Polish",), "golabki": ("Polish",),
    "mofongo": ("Puerto Rican",), "pernil": ("Puerto Rican",),
    "tostones": ("Puerto Rican",), "alcapurria": ("Puerto Rican",),
    "arroz con gandules": ("Puerto Rican",),
    "shawarma": ("Middle Eastern",), "kebab": ("Middle Eastern",),
    "falafel": ("Middle Eastern",), "hummus": ("Middle Eastern",),
    "baba ganoush": ("Middle Eastern",), "pita": ("Middle Eastern",),
    "labneh": ("Middle Eastern",), "fattoush": ("Middle Eastern",),
    "kibbeh": ("Middle Eastern",),
    "gyro": ("Greek",), "souvlaki": ("Greek",), "moussaka": ("Greek",),
    "spanakopita": ("Greek",), "baklava": ("Greek", "Middle Eastern"),
    "tzatziki": ("Greek",), "saganaki": ("Greek",),
    "espresso": ("Coffee/Cafe",), "latte": ("Coffee/Cafe",),
    "cappuccino": ("Coffee/Cafe",), "cortado": ("Coffee/Cafe",),
    "shrimp": ("Seafood",), "calamari": ("Seafood", "Italian"),
    "clam chowder": ("Seafood",), "poke bowl": ("Japanese", "Seafood"),
    "filet mignon": ("Steak",), "ribeye": ("Steak",),
    "wagyu": ("Steak", "Japanese"), "porterhouse": ("Steak",),
}

INTENT_MAP: dict[str, IntentSignal] = {
    **_PHRASE_SIGNALS,
    **{dish: _signal(cuisines=cuisines) for dish, cuisines in _DISH_CUISINES.items()},
}

STOP_WORDS = frozenset({
    "i", "a", "an", "the", "and", "or", "but", "for", "with", "in", "on", "at",
    "to", "of", "is", "it", "that", "this", "was", "are", "be", "has", "had",
    "want", "need", "looking", "find", "me", "my", "some", "good", "great", "best",
    "really", "very", "something", "place", "spot", "restaurant", "food", "eat",
    "dining", "somewhere", "chicago", "tonight", "today", "please", "like", "would",
    "could", "should", "can", "just", "also", "too", "not", "any", "all", "more",
})


def known_phrases() -> frozenset[str]:
    """Every phrase any table reacts to, lower-cased."""
    phrases: set[str] = set(INTENT_MAP)
    for table in (CUISINE_KEYWORDS, TAG_KEYWORDS, FEATURE_KEYWORDS):
        for keywords in table.values():
            phrases.update(keywords)
    phrases.update(DIETARY_KEYWORDS)
    return frozenset(phrases)
