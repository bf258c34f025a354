import json

import pytest

from price_monitor.services import offer_normalizer as normalizer_module
from price_monitor.services.offer_normalizer import (
    CONDITIONS_FALLBACK_ERROR,
    FEATURES_FALLBACK_ERROR,
    OfferNormalizer,
    parse_llm_json,
)
from price_monitor.utils import OpenAIServiceError

CONDITIONS_TEXT = "R$ 1.500,00 no PIX (10% de desconto) ou em até 12x de R$ 150,00 sem juros"

CONDITIONS_REPLY = {
    "tipo_pagamento_principal": "pix",
    "desconto_a_vista_percentual": 10,
    "desconto_a_vista_valor": 150.0,
    "parcelas_sem_juros": 12,
    "parcelas_com_juros": None,
    "texto_frete_gratis": False,
    "condicao_frete_gratis": None,
    "texto_original_condicoes": CONDITIONS_TEXT,
}

SPECS_HTML = "<p><strong>Marca:</strong><br>XFX</p><p><strong>Memory Size:</strong><br>8 GB</p>"


@pytest.fixture
def normalizer(mock_openai_service):
    return OfferNormalizer(openai_service=mock_openai_service, model="test-model")


# --- parse_llm_json ---


def test_parse_llm_json_plain():
    assert parse_llm_json('{"a": 1}') == {"a": 1}


def test_parse_llm_json_strips_code_fences():
    assert parse_llm_json('```json\n{"marca": "XFX"}\n```') == {"marca": "XFX"}


@pytest.mark.parametrize("content", ["not json", "[1, 2]", "```json\n```"])
def test_parse_llm_json_rejects_non_objects(content):
    with pytest.raises(ValueError):
        parse_llm_json(content)


# --- normalize_conditions ---


@pytest.mark.asyncio
async def test_normalize_conditions_success(normalizer, mock_openai_service):
    mock_openai_service.generate_response.return_value = json.dumps(CONDITIONS_REPLY)

    result = await normalizer.normalize_conditions(CONDITIONS_TEXT)

    assert result == CONDITIONS_REPLY
    prompt = mock_openai_service.generate_response.call_args.args[0]
    assert CONDITIONS_TEXT in prompt
    assert mock_openai_service.generate_response.call_args.kwargs == {"model": "test-model", "use_json_mode": True}


@pytest.mark.asyncio
async def test_normalize_conditions_fills_missing_keys(normalizer, mock_openai_service):
    mock_openai_service.generate_response.return_value = '{"parcelas_sem_juros": 10, "extra_note": "boleto"}'

    result = await normalizer.normalize_conditions("Em até 10x sem juros")

    assert result["parcelas_sem_juros"] == 10
    assert result["extra_note"] == "boleto"
    assert result["texto_frete_gratis"] is None
    assert "tipo_pagamento_principal" in result


@pytest.mark.asyncio
async def test_normalize_conditions_keeps_reply_with_unexpected_types(normalizer, mock_openai_service):
    mock_openai_service.generate_response.return_value = '{"parcelas_sem_juros": "doze"}'

    result = await normalizer.normalize_conditions("12x sem juros")

    assert result == {"parcelas_sem_juros": "doze"}


@pytest.mark.asyncio
async def test_normalize_conditions_api_failure_returns_fallback(normalizer, mock_openai_service):
    mock_openai_service.generate_response.side_effect = OpenAIServiceError("OpenAI API error after all retries")

    result = await normalizer.normalize_conditions(CONDITIONS_TEXT)

    assert result == {"error": CONDITIONS_FALLBACK_ERROR}


@pytest.mark.asyncio
async def test_normalize_conditions_bad_json_returns_fallback(normalizer, mock_openai_service):
    mock_openai_service.generate_response.return_value = "Sure! Here are the conditions: parcelas=12"

    result = await normalizer.normalize_conditions(CONDITIONS_TEXT)

    assert result == {"error": CONDITIONS_FALLBACK_ERROR}


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "   "])
async def test_normalize_conditions_skips_empty_input(normalizer, mock_openai_service, text):
    assert await normalizer.normalize_conditions(text) is None
    mock_openai_service.generate_response.assert_not_called()


# --- extract_features ---


@pytest.mark.asyncio
async def test_extract_features_success(normalizer, mock_openai_service):
    mock_openai_service.generate_response.return_value = '```json\n{"marca": "XFX", "memory_size_gb": 8}\n```'

    result = await normalizer.extract_features(SPECS_HTML)

    assert result == {"marca": "XFX", "memory_size_gb": 8}
    assert SPECS_HTML in mock_openai_service.generate_response.call_args.args[0]


@pytest.mark.asyncio
async def test_extract_features_failure_returns_fallback(normalizer, mock_openai_service):
    mock_openai_service.generate_response.side_effect = OpenAIServiceError("Unexpected OpenAI Failure")

    assert await normalizer.extract_features(SPECS_HTML) == {"error": FEATURES_FALLBACK_ERROR}


@pytest.mark.asyncio
async def test_extract_features_skips_missing_html(normalizer, mock_openai_service):
    assert await normalizer.extract_features(None) is None
    mock_openai_service.generate_response.assert_not_called()


@pytest.mark.asyncio
async def test_long_input_is_truncated(normalizer, mock_openai_service, monkeypatch):
    monkeypatch.setattr(normalizer_module, "LLM_MAX_INPUT_CHARS", 50)
    mock_openai_service.generate_response.return_value = '{"marca": "XFX"}'

    await normalizer.extract_features("<p>" + "x" * 500 + "</p>")

    prompt = mock_openai_service.generate_response.call_args.args[0]
    assert "x" * 60 not in prompt
    assert "(truncated due to length)" in prompt
