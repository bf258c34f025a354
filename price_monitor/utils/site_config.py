"""Site configuration management with per-site page selectors."""

import json
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError

import price_monitor.utils.config as config  # Import as module
from price_monitor.utils import logger


class SiteSelectors(BaseModel):
    """
    CSS selectors locating the interesting parts of one site's product page.

    Attributes:
        name: Human-readable site name
        hostnames: Hostnames this config applies to
        product_name: Selector for the product title
        price_cash: Selector for the cash (upfront) price
        price_installment: Selector for the installment price text
        technical_specs: Selector for the technical specifications block (inner HTML is used)
        payment_conditions: Selector for the payment/shipping conditions block
        wait_for: Selectors the browser waits for before reading the page
    """

    name: str
    hostnames: List[str] = Field(default_factory=list)
    product_name: str
    price_cash: str
    price_installment: str
    technical_specs: str
    payment_conditions: str
    wait_for: List[str] = Field(default_factory=list)


class SiteConfig:
    """Loads site selector configs from JSON files and resolves them by URL hostname."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path(__file__).parent.parent / "site_configs" / "sites"
        self.site_configs: Dict[str, SiteSelectors] = {}
        self._load_site_configs()

    def _load_site_configs(self) -> None:
        """Load all site configurations from JSON files."""
        for config_file in sorted(self.config_dir.glob("*.json")):
            try:
                with open(config_file, "r", encoding="utf-8") as f:
                    raw = json.load(f)
                site_name = config_file.stem.lower()

                required_fields = {"name", "selectors"}
                if not all(field in raw for field in required_fields):
                    logger.error("❌ Missing required fields in %s", config_file.name)
                    continue

                self.site_configs[site_name] = SiteSelectors(
                    name=raw["name"],
                    hostnames=[h.lower() for h in raw.get("hostnames", [])],
                    wait_for=raw.get("wait_for", []),
                    **raw["selectors"],
                )
                logger.info("✅ Loaded selectors for %s", raw["name"])

            except json.JSONDecodeError as e:
                logger.error("❌ Invalid JSON in %s: %s", config_file.name, e)
            except ValidationError as e:
                logger.error("❌ Invalid selector config in %s: %s", config_file.name, e)
            except (IOError, OSError) as e:
                logger.error("❌ Error reading %s: %s", config_file.name, e)

    def get_site_config(self, site_name: str) -> SiteSelectors:
        """
        Get selectors for a site by config name.

        Raises:
            ValueError: If no config with that name was loaded
        """
        site_name = site_name.lower()
        if site_name not in self.site_configs:
            raise ValueError(f"No configuration found for site: {site_name}")
        return self.site_configs[site_name]

    def resolve(self, url: str) -> SiteSelectors:
        """
        Pick the selectors for a product URL.

        Matches the URL hostname against each config's hostnames and falls back
        to DEFAULT_SITE when nothing matches.
        """
        hostname = (urlparse(url).hostname or "").lower()
        for site in self.site_configs.values():
            if hostname in site.hostnames:
                return site
        logger.debug("No site config for host '%s', using default '%s'", hostname, config.DEFAULT_SITE)
        return self.get_site_config(config.DEFAULT_SITE)
