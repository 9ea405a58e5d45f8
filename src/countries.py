"""
Country registry.
Static, read-only list of the countries the streaming provider covers,
with display names and flag glyphs for the country selector.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rapidfuzz import process, fuzz  # fuzzy matching for the selector search box


DEFAULT_COUNTRY = 'us'


@dataclass(frozen=True)
class Country:
	code: str  # lowercase ISO 3166-1 alpha-2 code, as the provider uses it
	name: str
	flag: str


def _flag(code: str) -> str:
	# Two regional indicator symbols render as the country's flag
	return ''.join(chr(0x1F1E6 + ord(c) - ord('a')) for c in code.lower())


_NAMES: Tuple[Tuple[str, str], ...] = (
	('us', 'United States'),
	('gb', 'United Kingdom'),
	('ca', 'Canada'),
	('au', 'Australia'),
	('nz', 'New Zealand'),
	('ie', 'Ireland'),
	('de', 'Germany'),
	('at', 'Austria'),
	('ch', 'Switzerland'),
	('fr', 'France'),
	('be', 'Belgium'),
	('nl', 'Netherlands'),
	('es', 'Spain'),
	('pt', 'Portugal'),
	('it', 'Italy'),
	('gr', 'Greece'),
	('cy', 'Cyprus'),
	('dk', 'Denmark'),
	('se', 'Sweden'),
	('no', 'Norway'),
	('fi', 'Finland'),
	('is', 'Iceland'),
	('ee', 'Estonia'),
	('lt', 'Lithuania'),
	('pl', 'Poland'),
	('cz', 'Czech Republic'),
	('hu', 'Hungary'),
	('ro', 'Romania'),
	('bg', 'Bulgaria'),
	('hr', 'Croatia'),
	('si', 'Slovenia'),
	('rs', 'Serbia'),
	('mk', 'North Macedonia'),
	('al', 'Albania'),
	('md', 'Moldova'),
	('ua', 'Ukraine'),
	('tr', 'Turkey'),
	('az', 'Azerbaijan'),
	('il', 'Israel'),
	('ae', 'United Arab Emirates'),
	('za', 'South Africa'),
	('in', 'India'),
	('jp', 'Japan'),
	('kr', 'South Korea'),
	('hk', 'Hong Kong'),
	('sg', 'Singapore'),
	('my', 'Malaysia'),
	('th', 'Thailand'),
	('id', 'Indonesia'),
	('ph', 'Philippines'),
	('vn', 'Vietnam'),
	('mx', 'Mexico'),
	('br', 'Brazil'),
	('ar', 'Argentina'),
	('cl', 'Chile'),
	('co', 'Colombia'),
	('pe', 'Peru'),
	('ec', 'Ecuador'),
	('pa', 'Panama'),
	('uy', 'Uruguay'),
)

COUNTRIES: Tuple[Country, ...] = tuple(Country(code=c, name=n, flag=_flag(c)) for c, n in _NAMES)
_BY_CODE = {c.code: c for c in COUNTRIES}


def get_country(code: Optional[str]) -> Optional[Country]:
	"""Look up a country by code (case-insensitive); None when unknown."""
	if not code:
		return None
	return _BY_CODE.get(code.strip().lower())


def display_name(code: str) -> str:
	"""Country name, or the raw code when the registry does not know it."""
	country = get_country(code)
	return country.name if country else code


def display_label(code: str) -> str:
	"""Flag plus name for dropdowns, e.g. '🇺🇸 United States'."""
	country = get_country(code)
	return f"{country.flag} {country.name}" if country else code


def filter_countries(text: str, fuzzy_cutoff: int = 75) -> List[Country]:
	"""
	Filter the registry the way the selector's search box does: substring match on the name.
	Falls back to fuzzy matching when no name contains the text, so small typos still match.
	"""
	needle = (text or '').strip().lower()
	if not needle:
		return list(COUNTRIES)

	matches = [c for c in COUNTRIES if needle in c.name.lower()]
	if matches:
		return matches

	names = [c.name.lower() for c in COUNTRIES]
	hits = process.extract(needle, names, scorer=fuzz.WRatio, score_cutoff=fuzzy_cutoff, limit=5)
	return [COUNTRIES[idx] for _, _, idx in hits]
