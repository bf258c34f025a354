"""
Technical Features Prompt
=========================

Turns the HTML of a technical specifications block ("key: value" pairs) into a
flat JSON object with snake_case keys.
"""


def get_prompt(specs_html: str) -> str:
    """Generate the technical features extraction prompt."""
    return f"""
The following text contains the technical specifications of a hardware component as HTML, made of "key: value" pairs.
Extract every feature and its value, normalizing key names to snake_case and converting numeric values where appropriate
(fold the unit into the key name, e.g. "1875 MHz" under "base_clock_up_to_mhz" becomes 1875).
Return a single flat JSON object. If a field is not found or not applicable, use null.
Ignore HTML formatting such as <p>, <strong>, <br>.

Example input:
<p><strong>Marca:</strong><br>XFX</p><p><strong>Modelo:</strong><br>RX-76PQICKBY</p><p><strong>Bus Type:</strong><br>PCI-E 4.0</p>
<p><strong>Base clock Up to:</strong><br>1875 MHz</p><p><strong>Memory Size:</strong><br>8 GB</p><p><strong>DisplayPort 2.1:</strong><br>3x</p>

Example JSON output:
{{
  "marca": "XFX",
  "modelo": "RX-76PQICKBY",
  "bus_type": "PCI-E 4.0",
  "base_clock_up_to_mhz": 1875,
  "memory_size_gb": 8,
  "display_port_2_1_quantity": 3
}}

Technical specifications (HTML):
{specs_html}
""".strip()
