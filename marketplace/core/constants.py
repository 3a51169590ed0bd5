"""Application constants.

Contains the state-machine transition tables, budget bands used by the
browse filters, and the static service category catalogue.
"""

# ---------------------------------------------------------------------------
# State machines
# Terminal states have no entry.
# ---------------------------------------------------------------------------
JOB_TRANSITIONS: dict[str, set[str]] = {
    "open": {"in_progress", "cancelled"},
    "in_progress": {"completed", "cancelled"},
}

BID_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"accepted", "rejected"},
}

# ---------------------------------------------------------------------------
# Budget bands for the browse filter: (lower, upper, lower_inclusive,
# upper_inclusive).  None means unbounded.
# ---------------------------------------------------------------------------
BUDGET_BANDS: dict[str, tuple[float | None, float | None, bool, bool]] = {
    "under-100": (None, 100, False, False),
    "100-500": (100, 500, True, True),
    "500-1000": (500, 1000, True, True),
    "over-1000": (1000, None, False, False),
}

# Number of bids shown in the provider dashboard activity feed
RECENT_ACTIVITY_LIMIT: int = 3

# ---------------------------------------------------------------------------
# Service categories offered in the post-a-job form and browse filters
# ---------------------------------------------------------------------------
SERVICE_CATEGORIES: list[dict[str, object]] = [
    {
        "id": "home-repair",
        "name": "Home Repair",
        "description": "General home maintenance and repairs",
        "subcategories": [
            "Plumbing", "Electrical", "HVAC", "Appliance Repair",
            "General Handyman",
        ],
    },
    {
        "id": "cleaning",
        "name": "Cleaning",
        "description": "Professional cleaning services",
        "subcategories": [
            "House Cleaning", "Deep Cleaning", "Move-in/Move-out",
            "Post-Construction", "Window Cleaning",
        ],
    },
    {
        "id": "landscaping",
        "name": "Landscaping",
        "description": "Outdoor and garden services",
        "subcategories": [
            "Lawn Care", "Tree Service", "Garden Design", "Irrigation",
            "Snow Removal",
        ],
    },
    {
        "id": "painting",
        "name": "Painting",
        "description": "Interior and exterior painting",
        "subcategories": [
            "Interior Painting", "Exterior Painting", "Cabinet Painting",
            "Pressure Washing", "Wallpaper",
        ],
    },
    {
        "id": "moving",
        "name": "Moving",
        "description": "Moving and delivery services",
        "subcategories": [
            "Local Moving", "Long Distance", "Packing",
            "Furniture Assembly", "Junk Removal",
        ],
    },
    {
        "id": "automotive",
        "name": "Automotive",
        "description": "Car maintenance and repair",
        "subcategories": [
            "Oil Change", "Brake Service", "Tire Service", "Car Detailing",
            "Mobile Mechanic",
        ],
    },
]
