"""Demo posts used to initialize an empty store."""

SEED_POSTS: list[dict] = [
    {
        "id": 1,
        "title": "Free Piano Lessons for Seniors",
        "type": "Offer",
        "author": "Sarah Chen",
        "location": "Cambridge",
        "description": (
            "Offering free piano lessons for seniors at the community center. "
            "Available every Saturday morning."
        ),
        "date": "2024-03-15",
        "category": "Education",
    },
    {
        "id": 2,
        "title": "Community Garden Volunteers Needed",
        "type": "Request",
        "author": "Mike Johnson",
        "location": "Boston",
        "description": (
            "Looking for volunteers to help maintain our community garden. "
            "Tools and refreshments provided."
        ),
        "date": "2024-03-14",
        "category": "Volunteering",
    },
    {
        "id": 3,
        "title": "Local Art Exhibition Space Available",
        "type": "Offer",
        "author": "Emma Davis",
        "location": "Cambridge",
        "description": "Offering free exhibition space for local artists at the neighborhood gallery.",
        "date": "2024-03-13",
        "category": "Arts",
    },
]
