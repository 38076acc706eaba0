"""Schwab web platform endpoints and fixed login-page constants."""

HOMEPAGE_URL = "https://www.schwab.com/"
ACCOUNT_SUMMARY_URL = "https://client.schwab.com/clientapps/accounts/summary/"
TRADE_TICKET_URL = "https://client.schwab.com/app/trade/tom/trade?ShowUN=YES"

_GATEWAY = "https://ausgateway.schwab.com/api"

ORDER_VERIFICATION_V2_URL = f"{_GATEWAY}/is.TradeOrderManagementWeb/v1/TradeOrderManagementWebPort/orders"
ACCOUNT_INFO_V2_URL = f"{_GATEWAY}/is.TradeOrderManagementWeb/v1/TradeOrderManagementWebPort/customer/accounts"
POSITIONS_V2_URL = f"{_GATEWAY}/is.Holdings/V1/Holdings/HoldingV2"
TICKER_QUOTES_V2_URL = f"{_GATEWAY}/is.TradeOrderManagementWeb/v1/TradeOrderManagementWebPort/market/quotes/list"
ORDERS_V2_URL = (
    f"{_GATEWAY}/is.TradeOrderStatusWeb/ITradeOrderStatusWeb/ITradeOrderStatusWebPort/orders/listView"
    "?DateRange=All&OrderStatusType=All&SecurityType=AllSecurities&Type=All"
    "&ShowAdvanceOrder=true&SortOrder=Ascending&SortColumn=Status&CostMethod=M"
    "&IsSimOrManagedAccount=false&EnableDateFilterByActivity=true"
)
CANCEL_ORDER_V2_URL = f"{_GATEWAY}/is.TradeOrderStatusWeb/ITradeOrderStatusWeb/ITradeOrderStatusWebPort/orders/cancelorder"
TRANSACTION_HISTORY_V2_URL = f"{_GATEWAY}/is.TransactionHistoryWeb/TransactionHistoryInterface/TransactionHistory/brokerage/transactions/export"
LOT_DETAILS_V2_URL = f"{_GATEWAY}/is.Holdings/V1/Lots"
OPTION_CHAINS_V2_URL = f"{_GATEWAY}/is.CSOptionChainsWeb/v1/OptionChainsPort/OptionChains/chains"

# Legacy client.schwab.com API
POSITIONS_DATA_URL = "https://client.schwab.com/api/PositionV2/PositionsDataV2"
ORDER_VERIFICATION_URL = "https://client.schwab.com/api/ts/stamp/verifyOrder"
ORDER_CONFIRMATION_URL = "https://client.schwab.com/api/ts/stamp/confirmorder"

TOKEN_AUTHORIZE_URL = "https://client.schwab.com/api/auth/authorize/scope/{scope}"

# Cookies are only collected for these origins; the full jar overflows
# request header limits (HTTP 431).
SESSION_COOKIE_DOMAINS = (
    "https://www.schwab.com",
    "https://client.schwab.com",
    "https://ausgateway.schwab.com",
)

BALANCES_REQUEST_PATTERN = r"balancespositions"
TRADE_URL_PATTERN = r"app/trade"

LOGIN_IFRAME_SELECTOR = "iframe#schwablmslogin"
LANDING_PAGE_SELECTOR = "select#landingPageOptions"
LANDING_PAGE_TRADE_INDEX = 3
LOGIN_ID_SELECTOR = '[placeholder="Login ID"]'
PASSWORD_SELECTOR = '[placeholder="Password"]'
TRADE_SYMBOL_SELECTOR = "#_txtSymbol"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)
BROWSER_ARGS = (
    "--disable-blink-features=AutomationControlled",
    "--disable-automation",
)
VIEWPORT = {"width": 1920, "height": 1080}

ACCEPTED_RETURN_CODES = frozenset({0, 10})
