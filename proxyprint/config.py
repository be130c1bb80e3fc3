from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ProxyPrint"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    # Key into Scryfall's image_uris (small, normal, large, png)
    scryfall_image_size: str = "normal"
    user_agent: str = "ProxyPrint/1.0"

    lookup_timeout: float = 5.0
    image_fetch_timeout: float = 10.0
    max_concurrent_lookups: int = 8
    # Upper bound on physical cards (sum of quantities) in one PDF
    max_cards_per_request: int = 5000

    default_layout: str = "self-cut"
    default_enable_bleed: bool = True


settings = Settings()


# =============================================================================
# LIVE PREVIEW LIMITS
# =============================================================================

# Lists longer than this get no preview (too many upstream calls per keystroke)
PREVIEW_MAX_ENTRIES = 20

# Copies of a single entry shown in the preview
PREVIEW_COPIES_PER_CARD = 3

# One self-cut page worth of cards
PREVIEW_MAX_CARDS = 9

PDF_FILENAME = "proxyprint-cards.pdf"
