"""
Classification + extraction instruction sent with every OCR request.
"""
from __future__ import annotations

from paybox.config import settings

_TEMPLATE = """Analiza el documento de la imagen y clasifícalo como uno de:
1. FACTURA ELECTRÓNICA: tiene RUC, razón social y número de factura.
2. COMPROBANTE DE PAGO: constancia de Yape, Plin, transferencia bancaria, depósito o similar.

La empresa {org_name} (RUC {org_tax_id}) es quien RECIBE las facturas.
Nunca devuelvas sus datos como emisor ni como beneficiario.

Si es FACTURA extrae:
- beneficiario: razón social de quien EMITE la factura
- ruc: RUC del emisor
- monto: importe total
- fecha: fecha de emisión
- numero_factura: serie y número (ej. F001-00001234)
- descripcion: resumen de los bienes o servicios
- metodo_pago: null

Si es COMPROBANTE extrae:
- beneficiario: quien recibió el dinero
- monto: importe pagado
- fecha y hora de la operación
- metodo_pago: Yape, Plin, Transferencia, Tarjeta o Efectivo
- numero_operacion: código de operación
- descripcion: concepto o glosa, si existe

Responde SOLO con un objeto JSON con estas claves:
{{
  "tipo_documento": "factura" | "comprobante",
  "fecha": "YYYY-MM-DD",
  "hora": "HH:MM" | null,
  "beneficiario": string,
  "ruc": string | null,
  "monto": number,
  "moneda": "soles" | "dolares",
  "metodo_pago": string | null,
  "numero_factura": string | null,
  "numero_operacion": string | null,
  "descripcion": string | null
}}

Moneda: "S/" es "soles"; "$" o "USD" es "dolares".
Si un dato no aparece usa null. No agregues texto fuera del JSON."""


def build_prompt() -> str:
    return _TEMPLATE.format(org_name=settings.ORG_NAME, org_tax_id=settings.ORG_TAX_ID)
