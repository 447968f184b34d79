"""Built-in currencies and default settings."""

from ledgerwell.domain.entities import AppSettings, Currency

DEFAULT_CURRENCIES: tuple[Currency, ...] = (
    Currency(id="usd", code="USD", name="US Dollar", symbol="$", rate=1),
    Currency(id="eur", code="EUR", name="Euro", symbol="€", rate=0.85),
    Currency(id="gbp", code="GBP", name="British Pound", symbol="£", rate=0.73),
    Currency(id="jpy", code="JPY", name="Japanese Yen", symbol="¥", rate=110),
    Currency(id="cad", code="CAD", name="Canadian Dollar", symbol="C$", rate=1.25),
    Currency(id="aud", code="AUD", name="Australian Dollar", symbol="A$", rate=1.35),
    Currency(id="chf", code="CHF", name="Swiss Franc", symbol="CHF", rate=0.92),
    Currency(id="cny", code="CNY", name="Chinese Yuan", symbol="¥", rate=6.45),
    Currency(id="inr", code="INR", name="Indian Rupee", symbol="₹", rate=74.5),
    Currency(id="krw", code="KRW", name="South Korean Won", symbol="₩", rate=1180),
    Currency(id="brl", code="BRL", name="Brazilian Real", symbol="R$", rate=5.2),
    Currency(id="mxn", code="MXN", name="Mexican Peso", symbol="$", rate=20.1),
    Currency(id="rub", code="RUB", name="Russian Ruble", symbol="₽", rate=75.8),
    Currency(id="try", code="TRY", name="Turkish Lira", symbol="₺", rate=18.5),
    Currency(id="aed", code="AED", name="UAE Dirham", symbol="د.إ", rate=3.67),
    Currency(id="sar", code="SAR", name="Saudi Riyal", symbol="ر.س", rate=3.75),
    Currency(id="sgd", code="SGD", name="Singapore Dollar", symbol="S$", rate=1.36),
    Currency(id="hkd", code="HKD", name="Hong Kong Dollar", symbol="HK$", rate=7.8),
    Currency(id="nzd", code="NZD", name="New Zealand Dollar", symbol="NZ$", rate=1.42),
    Currency(id="sek", code="SEK", name="Swedish Krona", symbol="kr", rate=8.9),
    Currency(id="nok", code="NOK", name="Norwegian Krone", symbol="kr", rate=8.7),
    Currency(id="dkk", code="DKK", name="Danish Krone", symbol="kr", rate=6.3),
    Currency(id="pln", code="PLN", name="Polish Zloty", symbol="zł", rate=3.9),
    Currency(id="czk", code="CZK", name="Czech Koruna", symbol="Kč", rate=21.8),
    Currency(id="huf", code="HUF", name="Hungarian Forint", symbol="Ft", rate=315),
    Currency(id="ils", code="ILS", name="Israeli Shekel", symbol="₪", rate=3.25),
    Currency(id="zar", code="ZAR", name="South African Rand", symbol="R", rate=14.8),
    Currency(id="thb", code="THB", name="Thai Baht", symbol="฿", rate=33.2),
    Currency(id="php", code="PHP", name="Philippine Peso", symbol="₱", rate=55.5),
    Currency(id="myr", code="MYR", name="Malaysian Ringgit", symbol="RM", rate=4.2),
    Currency(id="idr", code="IDR", name="Indonesian Rupiah", symbol="Rp", rate=14300),
    Currency(id="vnd", code="VND", name="Vietnamese Dong", symbol="₫", rate=23500),
    Currency(id="egp", code="EGP", name="Egyptian Pound", symbol="ج.م", rate=30.9),
    Currency(id="ngn", code="NGN", name="Nigerian Naira", symbol="₦", rate=410),
    Currency(id="kes", code="KES", name="Kenyan Shilling", symbol="KSh", rate=110),
    Currency(id="cop", code="COP", name="Colombian Peso", symbol="$", rate=3900),
    Currency(id="ars", code="ARS", name="Argentine Peso", symbol="$", rate=350),
    Currency(id="clp", code="CLP", name="Chilean Peso", symbol="$", rate=790),
    Currency(id="pen", code="PEN", name="Peruvian Sol", symbol="S/", rate=3.65),
)

# Rates are relative to this currency
BASE_CURRENCY = DEFAULT_CURRENCIES[0]

BUILTIN_CODES = frozenset(c.code for c in DEFAULT_CURRENCIES)

SUPPORTED_LANGUAGES = ("en", "es", "fr", "de", "ar", "fa", "it", "pt", "ru", "zh", "ja", "ko", "id")

THEMES = ("light", "dark")

DEFAULT_SETTINGS = AppSettings(
    default_currency=BASE_CURRENCY,
    language="en",
    theme="light",
    auto_update_rates=True,
)
