"""
Payment Conditions Prompt
=========================

Normalizes the free-text payment and shipping block of a product page
(installments, upfront discount, free shipping rules) into a fixed JSON shape.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PaymentConditions(BaseModel):
    """Structured output expected from the payment conditions prompt."""

    tipo_pagamento_principal: Optional[str] = Field(default=None, description="Main payment type of the offer (boleto, cartao_credito, pix, transferencia)")
    desconto_a_vista_percentual: Optional[float] = Field(default=None, description="Upfront payment discount in percent")
    desconto_a_vista_valor: Optional[float] = Field(default=None, description="Fixed upfront payment discount amount")
    parcelas_sem_juros: Optional[int] = Field(default=None, description="Maximum number of interest-free installments")
    parcelas_com_juros: Optional[int] = Field(default=None, description="Maximum number of installments with interest")
    texto_frete_gratis: Optional[bool] = Field(default=None, description="Whether free shipping is explicitly mentioned")
    condicao_frete_gratis: Optional[str] = Field(default=None, description="Condition for free shipping")
    texto_original_condicoes: Optional[str] = Field(default=None, description="The full original conditions text")


def get_prompt(conditions_text: str) -> str:
    """Generate the payment conditions normalization prompt."""
    return f"""
Given the following payment and shipping conditions text from an e-commerce product page, extract and normalize the relevant information.
Focus on installment terms (number of installments, interest), upfront payment discount (percentage or amount), and shipping conditions (free, price, regions).
Return a single JSON object. If a field is not found or not applicable, use null.

Fields to extract:
- "tipo_pagamento_principal": Main payment type of the offer (e.g. "boleto", "cartao_credito", "pix", "transferencia").
- "desconto_a_vista_percentual": Upfront payment discount percentage (number, e.g. 10 for 10%).
- "desconto_a_vista_valor": Fixed upfront discount amount (number).
- "parcelas_sem_juros": Maximum number of interest-free installments (integer).
- "parcelas_com_juros": Maximum number of installments with interest (integer).
- "texto_frete_gratis": Whether free shipping is explicitly mentioned (boolean).
- "condicao_frete_gratis": Condition for free shipping (e.g. "acima de R$X", "para região Y", or null).
- "texto_original_condicoes": The complete conditions text provided.

Examples:
1. Text: "R$ 1.500,00 no PIX (10% de desconto) ou em até 12x de R$ 150,00 sem juros"
   JSON: {{"tipo_pagamento_principal": "pix", "desconto_a_vista_percentual": 10, "desconto_a_vista_valor": 150.00, "parcelas_sem_juros": 12, "parcelas_com_juros": null, "texto_frete_gratis": false, "condicao_frete_gratis": null, "texto_original_condicoes": "R$ 1.500,00 no PIX (10% de desconto) ou em até 12x de R$ 150,00 sem juros"}}
2. Text: "Frete Grátis para Sul e Sudeste nas compras acima de R$500"
   JSON: {{"tipo_pagamento_principal": null, "desconto_a_vista_percentual": null, "desconto_a_vista_valor": null, "parcelas_sem_juros": null, "parcelas_com_juros": null, "texto_frete_gratis": true, "condicao_frete_gratis": "acima de R$500 para Sul e Sudeste", "texto_original_condicoes": "Frete Grátis para Sul e Sudeste nas compras acima de R$500"}}
3. Text: "Em até 10x sem juros no cartão ou 5% de desconto no boleto"
   JSON: {{"tipo_pagamento_principal": "cartao_credito", "desconto_a_vista_percentual": 5, "desconto_a_vista_valor": null, "parcelas_sem_juros": 10, "parcelas_com_juros": null, "texto_frete_gratis": false, "condicao_frete_gratis": null, "texto_original_condicoes": "Em até 10x sem juros no cartão ou 5% de desconto no boleto"}}

Conditions text:
{conditions_text}
""".strip()


def get_response_model():
    """Get the Pydantic model for response validation"""
    return PaymentConditions
