"""Biller/category mapping table and the two-tier ``categorize`` lookup.

The table maps known merchant phrases (stored upper-cased, unique under
case-insensitive comparison) to category labels. Lookups run in two tiers:

1. Biller phrases, longest first, so that ``"AMAZON PAY"`` out-ranks
   ``"AMAZON"`` when both occur in a description.
2. Generic keyword rules in declaration order, consulted only when no biller
   phrase matched.

Anything else is ``"Other"``. A :class:`MappingTable` is immutable once
built; callers that extend or edit mappings build a new table with
:meth:`MappingTable.with_entries`. This keeps :meth:`MappingTable.categorize`
a pure function of ``(description, table)`` and makes concurrent reads safe.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from typing import NamedTuple

from .categories import OTHER, is_allowed, normalize_name

# Categories whose billers are payment sources (banks) rather than merchants.
SOURCE_CATEGORIES: frozenset[str] = frozenset({"Banking & Fees"})


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Lowercase substrings that indicate ``category`` when no biller matched."""

    keywords: tuple[str, ...]
    category: str

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


class BillerMatch(NamedTuple):
    biller: str
    category: str
    position: int


# ---------------------------------------------------------------------------
# Built-in seed data
# ---------------------------------------------------------------------------

# Seed entries for a fresh mapping table. Keep phrases upper-case.
DEFAULT_BILLERS: tuple[tuple[str, str], ...] = (
    # Banking & Fees
    ("HDFC", "Banking & Fees"),
    ("SBI", "Banking & Fees"),
    ("ICICI", "Banking & Fees"),
    ("AXIS", "Banking & Fees"),
    ("KOTAK", "Banking & Fees"),
    ("YES BANK", "Banking & Fees"),
    ("IDFC", "Banking & Fees"),
    ("RBL", "Banking & Fees"),
    ("PUNJAB NATIONAL BANK", "Banking & Fees"),
    ("PNB", "Banking & Fees"),
    ("BANK OF BARODA", "Banking & Fees"),
    ("BOB", "Banking & Fees"),
    ("CANARA BANK", "Banking & Fees"),
    ("FEDERAL BANK", "Banking & Fees"),
    ("INDUSIND BANK", "Banking & Fees"),
    ("UNION BANK", "Banking & Fees"),
    ("STANDARD CHARTERED", "Banking & Fees"),
    ("HSBC", "Banking & Fees"),
    ("DBS", "Banking & Fees"),
    ("IDBI BANK", "Banking & Fees"),

    # Food & Dining
    ("SWIGGY", "Food & Dining"),
    ("ZOMATO", "Food & Dining"),
    ("DOMINOS", "Food & Dining"),
    ("MCDONALDS", "Food & Dining"),
    ("STARBUCKS", "Food & Dining"),
    ("KFC", "Food & Dining"),
    ("BURGER KING", "Food & Dining"),
    ("PIZZA HUT", "Food & Dining"),
    ("DUNKIN", "Food & Dining"),
    ("CAFE COFFEE DAY", "Food & Dining"),
    ("CCD", "Food & Dining"),
    ("SUBWAY", "Food & Dining"),
    ("BEHROUZ BIRYANI", "Food & Dining"),
    ("FAASOS", "Food & Dining"),
    ("WOW! MOMO", "Food & Dining"),
    ("TACO BELL", "Food & Dining"),
    ("PIZZA EXPRESS", "Food & Dining"),
    ("BASKIN ROBBINS", "Food & Dining"),
    ("BARBEQUE NATION", "Food & Dining"),
    ("REBEL FOODS", "Food & Dining"),

    # Transport & Fuel
    ("UBER", "Transport & Fuel"),
    ("OLA", "Transport & Fuel"),
    ("RAPIDO", "Transport & Fuel"),
    ("METRO", "Transport & Fuel"),
    ("IRCTC", "Transport & Fuel"),
    ("INDIAN OIL", "Transport & Fuel"),
    ("HP PETROL", "Transport & Fuel"),
    ("BHARAT PETROLEUM", "Transport & Fuel"),
    ("BPCL", "Transport & Fuel"),
    ("IOCL", "Transport & Fuel"),
    ("SHELL", "Transport & Fuel"),
    ("BLUSMART", "Transport & Fuel"),
    ("ZOOMCAR", "Transport & Fuel"),
    ("NAYARA ENERGY", "Transport & Fuel"),
    ("JIO-BP", "Transport & Fuel"),
    ("FASTAG", "Transport & Fuel"),

    # Shopping
    ("AMAZON", "Shopping"),
    ("FLIPKART", "Shopping"),
    ("MYNTRA", "Shopping"),
    ("AJIO", "Shopping"),
    ("NYKAA", "Shopping"),
    ("MEESHO", "Shopping"),
    ("TATA CLIQ", "Shopping"),
    ("CROMA", "Shopping"),
    ("RELIANCE", "Shopping"),
    ("WESTSIDE", "Shopping"),
    ("PANTALOONS", "Shopping"),
    ("SHOPPERS STOP", "Shopping"),
    ("DECATHLON", "Shopping"),
    ("H&M", "Shopping"),
    ("ZARA", "Shopping"),
    ("LENSKART", "Shopping"),
    ("PEPPERFRY", "Shopping"),
    ("URBAN LADDER", "Shopping"),
    ("TITAN", "Shopping"),
    ("TANISHQ", "Shopping"),
    ("CARATLANE", "Shopping"),

    # UPI / Petty Cash
    ("PHONEPE", "UPI / Petty Cash"),
    ("PAYTM", "UPI / Petty Cash"),
    ("GPAY", "UPI / Petty Cash"),
    ("GOOGLE PAY", "UPI / Petty Cash"),
    ("CRED", "UPI / Petty Cash"),
    ("BHIM", "UPI / Petty Cash"),
    ("SLICE", "UPI / Petty Cash"),
    ("MOBIKWIK", "UPI / Petty Cash"),
    ("FREECHARGE", "UPI / Petty Cash"),
    ("AMAZON PAY", "UPI / Petty Cash"),
    ("WHATSAPP PAY", "UPI / Petty Cash"),

    # Groceries
    ("BIGBASKET", "Groceries"),
    ("BLINKIT", "Groceries"),
    ("ZEPTO", "Groceries"),
    ("INSTAMART", "Groceries"),
    ("DMART", "Groceries"),
    ("MORE", "Groceries"),
    ("RELIANCE FRESH", "Groceries"),
    ("JIOMART", "Groceries"),
    ("AMAZON FRESH", "Groceries"),
    ("SPENCER'S", "Groceries"),
    ("NATURE'S BASKET", "Groceries"),
    ("SPAR", "Groceries"),
    ("STAR BAZAAR", "Groceries"),
    ("LISCIOUS", "Groceries"),
    ("FRESHMENU", "Groceries"),

    # Subscriptions
    ("SPOTIFY", "Subscriptions"),
    ("APPLE MUSIC", "Subscriptions"),
    ("APPLE SERVICES", "Subscriptions"),
    ("AUDIBLE", "Subscriptions"),
    ("LINKEDIN", "Subscriptions"),
    ("OPENAI", "Subscriptions"),
    ("CHATGPT", "Subscriptions"),
    ("CURSOR", "Subscriptions"),
    ("GITHUB", "Subscriptions"),
    ("NOTION", "Subscriptions"),
    ("CANVA", "Subscriptions"),
    ("JIOSAAVN", "Subscriptions"),
    ("GAANA", "Subscriptions"),
    ("WYNK MUSIC", "Subscriptions"),
    ("TATA PLAY", "Subscriptions"),
    ("AIRTEL XSTREAM", "Subscriptions"),
    ("YOUTUBE MUSIC", "Subscriptions"),
    ("AMAZON MUSIC", "Subscriptions"),

    # Bills & Recharge
    ("AIRTEL", "Bills & Recharge"),
    ("JIO", "Bills & Recharge"),
    ("VI", "Bills & Recharge"),
    ("VODAFONE", "Bills & Recharge"),
    ("BSNL", "Bills & Recharge"),
    ("ACT FIBERNET", "Bills & Recharge"),
    ("HATHWAY", "Bills & Recharge"),
    ("TATA SKY", "Bills & Recharge"),
    ("D2H", "Bills & Recharge"),
    ("EXCITEL", "Bills & Recharge"),
    ("YOU BROADBAND", "Bills & Recharge"),
    ("ALLIANCE BROADBAND", "Bills & Recharge"),
    ("MTNL", "Bills & Recharge"),
    ("SUN DIRECT", "Bills & Recharge"),
    ("DISH TV", "Bills & Recharge"),

    # Utilities
    ("BESCOM", "Utilities"),
    ("MSEDCL", "Utilities"),
    ("TATA POWER", "Utilities"),
    ("ADANI", "Utilities"),
    ("MAHANAGAR GAS", "Utilities"),
    ("IGL", "Utilities"),
    ("PIPED GAS", "Utilities"),
    ("TORRENT POWER", "Utilities"),
    ("CESC", "Utilities"),
    ("GUJARAT GAS", "Utilities"),
    ("BWSSB", "Utilities"),
    ("DJB", "Utilities"),

    # Medical & Healthcare
    ("APOLLO", "Medical & Healthcare"),
    ("PHARMEASY", "Medical & Healthcare"),
    ("NETMEDS", "Medical & Healthcare"),
    ("1MG", "Medical & Healthcare"),
    ("TATA 1MG", "Medical & Healthcare"),
    ("MEDPLUS", "Medical & Healthcare"),
    ("PRACTO", "Medical & Healthcare"),
    ("CULT FIT", "Medical & Healthcare"),
    ("CULTFIT", "Medical & Healthcare"),
    ("MAX HEALTHCARE", "Medical & Healthcare"),
    ("FORTIS", "Medical & Healthcare"),
    ("MANIPAL HOSPITALS", "Medical & Healthcare"),
    ("DR LAL PATHLABS", "Medical & Healthcare"),
    ("METROPOLIS", "Medical & Healthcare"),
    ("HEALTHKART", "Medical & Healthcare"),
    ("TRUEMEDS", "Medical & Healthcare"),

    # Insurance
    ("LIC", "Insurance"),
    ("HDFC LIFE", "Insurance"),
    ("ICICI PRUDENTIAL", "Insurance"),
    ("SBI LIFE", "Insurance"),
    ("MAX LIFE", "Insurance"),
    ("STAR HEALTH", "Insurance"),
    ("ACKO", "Insurance"),
    ("DIGIT", "Insurance"),
    ("CARE HEALTH", "Insurance"),
    ("NIVA BUPA", "Insurance"),
    ("RELIANCE GENERAL", "Insurance"),
    ("BAJAJ ALLIANZ", "Insurance"),
    ("TATA AIG", "Insurance"),
    ("POLICYBAZAAR", "Insurance"),
    ("DITTO", "Insurance"),

    # Debt & EMI
    ("BAJAJ FINSERV", "Debt & EMI"),
    ("BAJAJ FINANCE", "Debt & EMI"),
    ("HOME CREDIT", "Debt & EMI"),
    ("TATA CAPITAL", "Debt & EMI"),
    ("MUTHOOT FINANCE", "Debt & EMI"),
    ("MANAPPURAM FINANCE", "Debt & EMI"),
    ("L&T FINANCE", "Debt & EMI"),
    ("MAHINDRA FINANCE", "Debt & EMI"),
    ("ADITYA BIRLA CAPITAL", "Debt & EMI"),
    ("NAVI", "Debt & EMI"),
    ("KREDITBEE", "Debt & EMI"),
    ("MONEYVIEW", "Debt & EMI"),

    # Education & Learning
    ("UDEMY", "Education & Learning"),
    ("COURSERA", "Education & Learning"),
    ("SKILLSHARE", "Education & Learning"),
    ("BYJU", "Education & Learning"),
    ("UNACADEMY", "Education & Learning"),
    ("LINKEDIN LEARNING", "Education & Learning"),
    ("UPGRAD", "Education & Learning"),
    ("SIMPLILEARN", "Education & Learning"),
    ("PHYSICS WALLAH", "Education & Learning"),
    ("VEDANTU", "Education & Learning"),
    ("KHAN ACADEMY", "Education & Learning"),
    ("DUOLINGO", "Education & Learning"),

    # Travel & Vacation
    ("MAKEMYTRIP", "Travel & Vacation"),
    ("MMT", "Travel & Vacation"),
    ("GOIBIBO", "Travel & Vacation"),
    ("CLEARTRIP", "Travel & Vacation"),
    ("YATRA", "Travel & Vacation"),
    ("BOOKING.COM", "Travel & Vacation"),
    ("AIRBNB", "Travel & Vacation"),
    ("OYO", "Travel & Vacation"),
    ("REDBUS", "Travel & Vacation"),
    ("EASEMYTRIP", "Travel & Vacation"),
    ("INDIGO", "Travel & Vacation"),
    ("AIR INDIA", "Travel & Vacation"),
    ("SPICEJET", "Travel & Vacation"),
    ("VISTARA", "Travel & Vacation"),
    ("AKASA AIR", "Travel & Vacation"),
    ("THOMAS COOK", "Travel & Vacation"),
    ("AGODA", "Travel & Vacation"),
    ("TRIVAGO", "Travel & Vacation"),

    # Entertainment
    ("PVR", "Entertainment"),
    ("INOX", "Entertainment"),
    ("BOOKMYSHOW", "Entertainment"),
    ("CINEPOLIS", "Entertainment"),
    ("MIRAJ CINEMAS", "Entertainment"),
    ("CARNIVAL CINEMAS", "Entertainment"),
    ("EVENTBRITE", "Entertainment"),
    ("PAYTM INSIDER", "Entertainment"),

    # OTT
    ("NETFLIX", "OTT"),
    ("AMAZON PRIME VIDEO", "OTT"),
    ("PRIME VIDEO", "OTT"),
    ("DISNEY+", "OTT"),
    ("DISNEY PLUS", "OTT"),
    ("MAX", "OTT"),
    ("HBO MAX", "OTT"),
    ("YOUTUBE PREMIUM", "OTT"),
    ("APPLE TV+", "OTT"),
    ("APPLE TV PLUS", "OTT"),
    ("HULU", "OTT"),
    ("PEACOCK", "OTT"),
    ("PARAMOUNT+", "OTT"),
    ("PARAMOUNT PLUS", "OTT"),
    ("DISCOVERY+", "OTT"),
    ("DISCOVERY PLUS", "OTT"),
    ("STAR+", "OTT"),
    ("RAKUTEN TV", "OTT"),
    ("VIAPLAY", "OTT"),
    ("JIOHOTSTAR", "OTT"),
    ("JIO HOTSTAR", "OTT"),
    ("HOTSTAR", "OTT"),
    ("ZEE5", "OTT"),
    ("SONYLIV", "OTT"),
    ("SONY LIV", "OTT"),
    ("MX PLAYER", "OTT"),
    ("ALTBALAJI", "OTT"),
    ("ALT BALAJI", "OTT"),
    ("AHA", "OTT"),
    ("SUN NXT", "OTT"),
    ("SUNNXT", "OTT"),
    ("HOICHOI", "OTT"),
    ("CRUNCHYROLL", "OTT"),
    ("HIDIVE", "OTT"),
    ("MUBI", "OTT"),
    ("CURIOSITYSTREAM", "OTT"),
    ("CURIOSITY STREAM", "OTT"),
    ("SHUDDER", "OTT"),
    ("BRITBOX", "OTT"),
    ("TUBI", "OTT"),
    ("PLUTO TV", "OTT"),
    ("THE ROKU CHANNEL", "OTT"),
    ("ROKU CHANNEL", "OTT"),
    ("FREEVEE", "OTT"),
    ("VUDU", "OTT"),

    # Investments
    ("ZERODHA", "Investments"),
    ("GROWW", "Investments"),
    ("UPSTOX", "Investments"),
    ("ANGEL ONE", "Investments"),
    ("KUVERA", "Investments"),
    ("ET MONEY", "Investments"),
    ("INDMONEY", "Investments"),
    ("SMALLCASE", "Investments"),
    ("COINSWITCH", "Investments"),
    ("WAZIRX", "Investments"),

    # Housing & Rent
    ("NOBROKER", "Housing & Rent"),
    ("MAGICBRICKS", "Housing & Rent"),
    ("HOUSING.COM", "Housing & Rent"),
    ("99ACRES", "Housing & Rent"),

    # Pet Care
    ("HEADS UP FOR TAILS", "Pet Care"),
    ("HUFT", "Pet Care"),
    ("ZIGLY", "Pet Care"),
    ("SUPERTAILS", "Pet Care"),

    # Vehicle Maintenance
    ("GOMECHANIC", "Vehicle Maintenance"),
    ("PITSTOP", "Vehicle Maintenance"),
    ("MARUTI SUZUKI SERVICE", "Vehicle Maintenance"),
    ("HYUNDAI SERVICE", "Vehicle Maintenance"),

    # Taxes
    ("INCOME TAX DEPARTMENT", "Taxes"),
    ("GST PORTAL", "Taxes"),
    ("CLEARTAX", "Taxes"),

    # Marketing & Ads
    ("GOOGLE ADS", "Marketing & Ads"),
    ("META ADS", "Marketing & Ads"),
    ("FACEBOOK ADS", "Marketing & Ads"),

    # Business Operations
    ("WEWORK", "Business Operations"),
    ("AWFIS", "Business Operations"),

    # Professional Fees
    ("FIVERR", "Professional Fees"),
    ("UPWORK", "Professional Fees"),
)

# Evaluated in order, after every biller phrase failed. Trailing spaces in
# "pg " and "ca " keep them from matching inside longer words.
KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        ("restaurant", "cafe", "food court", "dining", "eatery", "bakery", "dhaba"),
        "Food & Dining",
    ),
    KeywordRule(("petrol", "fuel", "diesel", "parking", "toll", "fastag"), "Transport & Fuel"),
    # Before Shopping so "grocery store" is not read as generic retail.
    KeywordRule(("grocery", "supermarket", "vegetables", "fruits", "kirana"), "Groceries"),
    KeywordRule(("mall", "store", "retail", "mart", "shop", "boutique"), "Shopping"),
    KeywordRule(("electricity", "water bill", "gas bill", "sewage", "municipal"), "Utilities"),
    KeywordRule(
        (
            "hospital",
            "clinic",
            "doctor",
            "pharmacy",
            "medical",
            "diagnostic",
            "lab test",
            "pathology",
        ),
        "Medical & Healthcare",
    ),
    KeywordRule(
        ("movie", "cinema", "theatre", "concert", "event", "game", "amusement"),
        "Entertainment",
    ),
    KeywordRule(("streaming", "ott", "watch party", "binge"), "OTT"),
    KeywordRule(
        ("school", "college", "university", "tuition", "coaching", "education", "course"),
        "Education & Learning",
    ),
    KeywordRule(
        ("flight", "hotel", "resort", "travel", "tour", "vacation", "airline"),
        "Travel & Vacation",
    ),
    KeywordRule(
        (
            "atm",
            "cash withdrawal",
            "bank fee",
            "annual fee",
            "interest charge",
            "finance charge",
            "late fee",
            "processing fee",
        ),
        "Banking & Fees",
    ),
    KeywordRule(("emi", "loan", "instalment", "installment", "credit line"), "Debt & EMI"),
    KeywordRule(("insurance", "premium", "policy"), "Insurance"),
    KeywordRule(
        ("rent", "housing", "apartment", "flat", "pg ", "hostel", "maintenance"),
        "Housing & Rent",
    ),
    KeywordRule(
        ("subscription", "membership", "premium plan", "monthly plan", "annual plan"),
        "Subscriptions",
    ),
    KeywordRule(
        ("recharge", "mobile", "broadband", "internet", "dth", "cable"), "Bills & Recharge"
    ),
    KeywordRule(
        ("gift", "donation", "charity", "ngo", "temple", "church", "mosque", "gurudwara"),
        "Gifts & Donations",
    ),
    KeywordRule(
        ("service center", "car wash", "tyre", "spare parts", "garage", "mechanic"),
        "Vehicle Maintenance",
    ),
    KeywordRule(("pet", "veterinary", "vet clinic", "pet shop", "pet food"), "Pet Care"),
    KeywordRule(
        ("consultant", "lawyer", "chartered accountant", "ca ", "legal", "professional fee"),
        "Professional Fees",
    ),
    KeywordRule(("tax", "gst", "income tax", "tds", "challan"), "Taxes"),
)


# ---------------------------------------------------------------------------
# Mapping table
# ---------------------------------------------------------------------------


def _normalize_biller(phrase: str) -> str:
    return normalize_name(phrase).upper()


class MappingTable:
    """Read-only, case-insensitive ``biller -> category`` table.

    Parameters
    ----------
    entries:
        ``(biller, category)`` pairs or a mapping. Billers are upper-cased;
        two entries that collide case-insensitively must agree on the
        category. Every category must belong to the closed category set.
    keyword_rules:
        Second-tier rules consulted by :meth:`categorize`. Their categories
        are checked against the closed set too.
    """

    __slots__ = ("_categories", "_by_length", "_keyword_rules", "_pattern")

    def __init__(
        self,
        entries: Iterable[tuple[str, str]] | Mapping[str, str] = DEFAULT_BILLERS,
        *,
        keyword_rules: Iterable[KeywordRule] = KEYWORD_RULES,
    ) -> None:
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        categories: dict[str, str] = {}
        for raw_biller, raw_category in pairs:
            biller = _normalize_biller(raw_biller)
            category = normalize_name(raw_category)
            if not biller:
                raise ValueError("biller phrase must not be blank")
            if not is_allowed(category):
                raise ValueError(f"unknown category {raw_category!r} for biller {raw_biller!r}")
            existing = categories.get(biller)
            if existing is not None and existing != category:
                raise ValueError(
                    f"conflicting categories for biller {biller!r}: {existing!r} vs {category!r}"
                )
            categories[biller] = category

        self._categories = categories
        # Stable sort keeps declaration order among equal-length phrases.
        self._by_length: tuple[tuple[str, str, str], ...] = tuple(
            (b, b.lower(), c) for b, c in sorted(categories.items(), key=lambda kv: -len(kv[0]))
        )
        rules = tuple(keyword_rules)
        for rule in rules:
            if not is_allowed(rule.category):
                raise ValueError(
                    f"unknown category {rule.category!r} for keyword rule {rule.keywords!r}"
                )
        self._keyword_rules = rules
        self._pattern = _compile_biller_pattern(b for b, _, _ in self._by_length)

    # -- read interface -------------------------------------------------

    def lookup(self, phrase: str) -> str | None:
        """Return the category stored for ``phrase`` (case-insensitive), if any."""

        return self._categories.get(_normalize_biller(phrase))

    def all_billers(self) -> tuple[str, ...]:
        """Return every biller phrase, longest first."""

        return tuple(b for b, _, _ in self._by_length)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._categories.items())

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, phrase: object) -> bool:
        return isinstance(phrase, str) and _normalize_biller(phrase) in self._categories

    # -- derived tables -------------------------------------------------

    def with_entries(self, entries: Iterable[tuple[str, str]] | Mapping[str, str]) -> MappingTable:
        """Return a new table with ``entries`` added or overriding existing ones."""

        merged = dict(self._categories)
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for biller, category in pairs:
            merged[_normalize_biller(biller)] = normalize_name(category)
        return MappingTable(merged, keyword_rules=self._keyword_rules)

    # -- matching -------------------------------------------------------

    def longest_contained(self, text: str) -> tuple[str, str] | None:
        """Return ``(biller, category)`` for the longest biller found in ``text``.

        Plain substring containment, case-insensitive.
        """

        lowered = text.lower()
        for biller, biller_lower, category in self._by_length:
            if biller_lower in lowered:
                return biller, category
        return None

    def categorize_keywords(self, text: str) -> str | None:
        lowered = text.lower()
        for rule in self._keyword_rules:
            if rule.matches(lowered):
                return rule.category
        return None

    def categorize(self, description: str) -> str:
        """Return the category for ``description``; never fails, defaults to ``"Other"``."""

        hit = self.longest_contained(description)
        if hit is not None:
            return hit[1]
        return self.categorize_keywords(description) or OTHER

    def find_billers(self, text: str) -> list[BillerMatch]:
        """Return billers occurring in ``text`` as whole tokens, in text order.

        At any position the longest phrase wins; matches do not overlap.
        """

        return [
            BillerMatch(
                biller=m.group(0).upper(),
                category=self._categories[_normalize_biller(m.group(0))],
                position=m.start(),
            )
            for m in self._pattern.finditer(text)
        ]

    def detect_biller(self, text: str) -> BillerMatch | None:
        """Return the earliest merchant biller in ``text``.

        Billers in :data:`SOURCE_CATEGORIES` (the paying bank) are used only
        when no merchant biller occurs.
        """

        matches = self.find_billers(text)
        for match in matches:
            if match.category not in SOURCE_CATEGORIES:
                return match
        return matches[0] if matches else None


def _compile_biller_pattern(billers_longest_first: Iterable[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(b) for b in billers_longest_first)
    if not alternation:
        # Matches nothing.
        return re.compile(r"(?!)")
    return re.compile(rf"(?<![A-Z0-9])(?:{alternation})(?![A-Z0-9])", re.IGNORECASE)


@cache
def default_table() -> MappingTable:
    """Return the shared table built from the built-in seed data."""

    return MappingTable()


def categorize(description: str, table: MappingTable | None = None) -> str:
    """Categorize ``description`` against ``table`` (the default table when omitted)."""

    if table is None:
        table = default_table()
    return table.categorize(description)


__all__ = [
    "DEFAULT_BILLERS",
    "KEYWORD_RULES",
    "SOURCE_CATEGORIES",
    "BillerMatch",
    "KeywordRule",
    "MappingTable",
    "categorize",
    "default_table",
]
