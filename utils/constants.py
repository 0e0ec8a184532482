from decimal import Decimal

APP_NAME = "Safe Ledger"
DB_FILE = "ledger.db"
BACKUP_FILE_PREFIX = "safe-ledger-backup"
EXPORT_VERSION = 1

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

# KV store keys, one serialized collection each
KEY_TRANSACTIONS = "transactions"
KEY_CUSTOM_CATEGORIES = "customCategories"
KEY_HOME_CATEGORIES = "homeCategories"
KEY_ACCOUNTS = "accounts"
KEY_RECURRING_RULES = "recurringRules"

STORAGE_KEYS = (
    KEY_TRANSACTIONS,
    KEY_CUSTOM_CATEGORIES,
    KEY_HOME_CATEGORIES,
    KEY_ACCOUNTS,
    KEY_RECURRING_RULES,
)

# MEI revenue limits (advisory)
ANNUAL_SAFE_LIMIT = Decimal("81000")
ANNUAL_MAX_LIMIT = Decimal("97200")
MONTHLY_SAFE_LIMIT = ANNUAL_SAFE_LIMIT / 12   # 6750
MONTHLY_MAX_LIMIT = ANNUAL_MAX_LIMIT / 12     # 8100
MONTHLY_ALERT_PERCENT = Decimal("75")

DEFAULT_ACCOUNT_ID = "cash-1"
DEFAULT_ACCOUNT_NAME = "Dinheiro (Não Fiscal)"

DEFAULT_CUSTOM_CATEGORIES = ["Transporte", "Alimentação", "Hospedagem"]
DEFAULT_HOME_CATEGORIES = ["Água", "Luz", "Internet", "Aluguel", "Cartão de Crédito"]

FALLBACK_CATEGORY = "Outros"
DEFAULT_INCOME_DESCRIPTION = "Venda"

# Installments never land past the 28th so every month has the day
INSTALLMENT_MAX_DAY = 28

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}
