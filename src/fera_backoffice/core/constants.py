"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_COMPANY_CATEGORY_IN = "Faturamento"
DEFAULT_COMPANY_CATEGORY_OUT = "Geral"
DEFAULT_SETTLEMENT_CATEGORY = "Pagamento Funcionários"

DEFAULT_SERIES_MONTHS = 6
CSV_DECIMALS = 2
CSV_DELIMITER = ";"

ENTRY_DESTINATION = "ALMOXARIFADO CENTRAL"
EXIT_DESTINATION = "EQUIPE DE CAMPO"

ASSISTANT_FALLBACK_REPLY = (
    "Desculpe, tive um problema ao processar sua solicitação. "
    "Verifique sua conexão ou tente novamente."
)
