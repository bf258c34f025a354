import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from price_monitor.dependencies import limiter
from price_monitor.services.openai_service import OpenAIService
from price_monitor.utils.site_config import SiteSelectors

# Configure logger for tests
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


SAMPLE_PRODUCT_HTML = """
<html>
<head><title>Placa de Vídeo XFX Radeon RX 7600</title></head>
<body>
  <h1 class="tit-prod">  Placa de Vídeo XFX Radeon RX 7600 8GB  </h1>
  <div class="valores">
    <p id="valVista">R$ 1.299,90</p>
    <p id="valParc">12x de R$ 127,44 sem juros no cartão</p>
  </div>
  <div class="box-pagamento-loja">
    <span>R$ 1.299,90 no PIX (15% de desconto)</span>
    <span>ou em até 12x de R$ 127,44 sem juros</span>
  </div>
  <div class="tecnicas"><p><strong>Marca:</strong><br>XFX</p><p><strong>Memory Size:</strong><br>8 GB</p></div>
</body>
</html>
"""


@pytest.fixture
def sample_product_html() -> str:
    return SAMPLE_PRODUCT_HTML


@pytest.fixture
def terabyte_selectors() -> SiteSelectors:
    """Selectors matching SAMPLE_PRODUCT_HTML."""
    return SiteSelectors(
        name="TerabyteShop",
        hostnames=["www.terabyteshop.com.br"],
        product_name="h1.tit-prod",
        price_cash="#valVista",
        price_installment="#valParc",
        technical_specs=".tecnicas",
        payment_conditions=".box-pagamento-loja",
        wait_for=["#valVista", "#valParc"],
    )


@pytest.fixture
def mock_openai_service():
    """Provides a MagicMock for the OpenAIService."""
    service = MagicMock(spec=OpenAIService)
    service.generate_response = AsyncMock(return_value="{}")
    return service


@pytest.fixture(autouse=True)
def disable_rate_limiter():
    """Route tests call the same endpoint many times from one client address."""
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous
