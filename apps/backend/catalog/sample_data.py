"""Built-in category records used when no catalog service is configured.

Slugs follow the catalog service convention: bare at level 1, cumulative
below that.
"""

from typing import Any, Dict, List

SAMPLE_CATEGORY_RECORDS: List[Dict[str, Any]] = [
    # Level 1
    {"id": "1", "name": "Men", "slug": "men", "order": 1, "description": "Browse our Men collection"},
    {"id": "5", "name": "Women", "slug": "women", "order": 2, "description": "Browse our Women collection"},
    {"id": "100", "name": "Electronics", "slug": "electronics", "order": 3,
     "description": "Latest gadgets and electronics"},
    {"id": "200", "name": "Home & Garden", "slug": "home-garden", "order": 4,
     "description": "Home improvement and garden supplies"},
    {"id": "300", "name": "Books", "slug": "books", "order": 5, "description": "Books and literature",
     "active": False},

    # Level 2 - Men
    {"id": "2", "name": "Mens Apparel", "slug": "men/mens-apparel", "parent_id": "1", "order": 1},
    {"id": "4", "name": "Accessories", "slug": "men/accessories", "parent_id": "1", "order": 2},

    # Level 3 - Mens Apparel
    {"id": "3", "name": "Casual Short Sleeve Shirts",
     "slug": "men/mens-apparel/casual-short-sleeve-shirts", "parent_id": "2", "order": 1},
    {"id": "6", "name": "Dress Shirts", "slug": "men/mens-apparel/dress-shirts", "parent_id": "2", "order": 2},

    # Level 2 - Women
    {"id": "7", "name": "Womens Apparel", "slug": "women/womens-apparel", "parent_id": "5", "order": 1},

    # Level 2 - Electronics
    {"id": "110", "name": "TVs & Audio", "slug": "electronics/tvs-audio", "parent_id": "100", "order": 1,
     "description": "Televisions and audio equipment"},
    {"id": "120", "name": "Computers", "slug": "electronics/computers", "parent_id": "100", "order": 2,
     "description": "Laptops, desktops, and computer accessories"},

    # Level 3 - TVs & Audio
    {"id": "111", "name": "OLED TVs", "slug": "electronics/tvs-audio/oled-tvs", "parent_id": "110", "order": 1},
    {"id": "113", "name": "Soundbars", "slug": "electronics/tvs-audio/soundbars", "parent_id": "110", "order": 2},

    # Level 3 - Computers
    {"id": "121", "name": "Laptops", "slug": "electronics/computers/laptops", "parent_id": "120", "order": 1},
    {"id": "123", "name": "Tablets", "slug": "electronics/computers/tablets", "parent_id": "120", "order": 2},

    # Level 2 - Home & Garden
    {"id": "210", "name": "Furniture", "slug": "home-garden/furniture", "parent_id": "200", "order": 1},
]
