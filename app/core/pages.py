"""Logical page keys used to look up maintenance records"""

HOME_KEY = "home"

DEFAULT_PAGES = [
    {
        "page_path": "home",
        "page_name": "Homepage",
        "maintenance_message": "Our homepage is currently under maintenance. We're working to improve your experience.",
    },
    {
        "page_path": "top-casinos",
        "page_name": "Best Casinos",
        "maintenance_message": "Our Best Casinos page is currently under maintenance. Please check back soon for the latest casino recommendations.",
    },
    {
        "page_path": "casinos",
        "page_name": "All Casinos",
        "maintenance_message": "Our Casinos directory is currently under maintenance. We're updating our casino database.",
    },
    {
        "page_path": "reviews",
        "page_name": "Reviews",
        "maintenance_message": "Our Reviews section is currently under maintenance. We're working on bringing you the latest casino reviews.",
    },
    {
        "page_path": "list-report",
        "page_name": "List Report",
        "maintenance_message": "Our List Report feature is currently under maintenance. Please try again later.",
    },
    {
        "page_path": "forum",
        "page_name": "Forum",
        "maintenance_message": "Our Forum is currently under maintenance. We're improving the community experience.",
    },
    {
        "page_path": "guide",
        "page_name": "Guide",
        "maintenance_message": "Our Guide section is currently under maintenance. We're updating our casino guides.",
    },
    {
        "page_path": "news",
        "page_name": "News",
        "maintenance_message": "Our News section is currently under maintenance. We're working on bringing you the latest casino news.",
    },
]


def page_key(path: str) -> str:
    """
    normalize a router path to its lookup key

    "/" maps to "home", every other path loses its leading slash
    ("/news" -> "news", "/a/b" -> "a/b"). Keys pass through unchanged.
    """
    path = (path or "").split("?", 1)[0].split("#", 1)[0]
    key = path.strip("/")
    return key or HOME_KEY
